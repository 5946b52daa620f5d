"""
Copyright 2018-present Krzysztof Nazarewski.
Licensed under the Apache License, Version 2.0 (the "License");
You may not use this file except in compliance with the License.
You may obtain a copy of the License at
      http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and* limitations under the License.*
"""
import sys

from . import ui


class DuoFrameExitBase(Exception):
    def __init__(self, message, return_code, result=None):
        """
        :type message: str
        :type return_code: int
        :type result: str
        """
        super().__init__(message, return_code)
        self.message = message
        self.return_code = return_code
        self.result = result

    def handle(self, duo_ui=None):
        duo_ui = duo_ui or ui.default
        self.handle_message(duo_ui)
        self.handle_result(duo_ui)
        self.exit()

    def handle_message(self, duo_ui):
        if self.message:
            duo_ui.info(self.message)

    def handle_result(self, duo_ui):
        if self.result:
            duo_ui.result(self.result)

    def exit(self):
        sys.exit(self.return_code)


class DuoFrameExitSuccess(DuoFrameExitBase):
    def __init__(self, message='', return_code=0, result=''):
        super().__init__(message, return_code, result)


class DuoFrameExitError(DuoFrameExitBase):
    def __init__(self, message='ERROR', return_code=1, output=''):
        super().__init__(message, return_code, output)


class DuoFrameError(Exception):
    """Base class for everything duo_frame raises on its own"""


class DuoServerError(DuoFrameError):
    """Duo answered with a stat other than OK; the body carries nothing more specific"""

    def __init__(self, stat=None):
        self.stat = stat
        super().__init__('duo: server error (stat={})'.format(stat))


class DuoDecodeError(DuoFrameError):
    """A Duo response could not be decoded into what the endpoint should return"""


class MethodNotSupported(DuoFrameError):
    """The requested method is not offered by this challenge"""


class ChallengeStateError(DuoFrameError):
    """An operation was called on a Challenge in the wrong state"""


class MalformedSignedRequest(DuoFrameError, ValueError):
    pass


class BadParentURL(DuoFrameError, ValueError):
    pass


class BadParent(DuoFrameError):
    """The Duo response is bound to a different parent than the identity provider"""


class DuoMfaDenied(DuoFrameError):
    """ Duo MFA was denied """

    def __init__(self, response):
        self.response = response
        super().__init__('Duo MFA denied: {}'.format(response.status or response.reason))


class DuoMfaTimeout(DuoFrameError):
    """ Gave up waiting for Duo MFA """

    def __init__(self, response, tries):
        self.response = response
        self.tries = tries
        super().__init__('Timed out waiting for Duo MFA after {} tries'.format(tries))


class DuoFrameConfigError(DuoFrameError, DuoFrameExitError):
    """Bad or missing configuration; exits the CLI with a message"""
