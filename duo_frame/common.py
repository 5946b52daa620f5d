"""
Copyright 2016-present Nike, Inc.
Licensed under the Apache License, Version 2.0 (the "License");
You may not use this file except in compliance with the License.
You may obtain a copy of the License at
      http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and* limitations under the License.*
"""
from collections import namedtuple

from . import errors

Device = namedtuple('Device', ['index', 'friendly_name'])

Method = namedtuple('Method', ['friendly_name', 'device_name', 'device_index'])

StatusResponse = namedtuple('StatusResponse', ['status_code', 'status'])

ChallengeResponse = namedtuple(
    'ChallengeResponse',
    ['status_code', 'result', 'result_url', 'parent', 'reason', 'status']
)

FinalResponse = namedtuple('FinalResponse', ['parent', 'cookie'])

SUCCESS = 'SUCCESS'
FAILURE = 'FAILURE'


class SignedRequest(namedtuple('SignedRequest', ['tx_sig', 'app_sig'])):
    """
       The sig_request handed out by the identity provider, "<tx_sig>:<app_sig>".

       tx_sig goes to Duo when the frame is requested, app_sig only comes back
       when the sig_response is assembled for the identity provider.
    """
    __slots__ = ()

    @classmethod
    def parse(cls, sig_request):
        parts = sig_request.split(':') if sig_request else []
        if len(parts) != 2:
            raise errors.MalformedSignedRequest(
                'sig_request must be "<tx_sig>:<app_sig>", got {} part(s)'.format(len(parts)))
        return cls(tx_sig=parts[0], app_sig=parts[1])

    def __str__(self):
        return '{}:{}'.format(self.tx_sig, self.app_sig)
