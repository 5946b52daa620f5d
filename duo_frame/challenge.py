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
import time
from urllib.parse import urlparse

from furl import furl

from . import envelope, errors, version
from .common import FAILURE, SUCCESS, SignedRequest
from .frame_page import extract_devices_and_methods
from .ui import default as default_ui

FRAME_VERSION = '2.6'

# Duo checks that these are present, nothing is measured
CLIENT_FINGERPRINT = {
    'java_version': '',
    'flash_version': '',
    'screen_resolution_width': '1920',
    'screen_resolution_height': '1080',
    'color_depth': '24',
    'is_cef_browser': 'false',
    'is_ipad_os': 'false',
}


def begin_challenge(session, parent, host, sig_request, post_action=None, ui=None):
    """ Request the Duo frame for a sig_request and read the devices and methods it offers

    :param session: requests.Session owned by the caller, cookies are kept on it
    :param parent: URL of the identity provider page that embeds Duo
    :param host: Duo API host, e.g. api-1234abcd.duosecurity.com
    :param sig_request: "<tx_sig>:<app_sig>" from the identity provider
    :param post_action: where the identity provider wants the sig_response, kept for the caller
    :rtype: Challenge
    """
    signed_request = SignedRequest.parse(sig_request)
    referer = _get_referer(parent)

    auth_url = furl(_get_origin(host)) / 'frame/web/v1/auth'
    auth_data = {
        'tx': signed_request.tx_sig,
        'parent': parent,
        'referer': referer,
    }
    auth_data.update(CLIENT_FINGERPRINT)

    with session.post(
            auth_url.url,
            params={'tx': signed_request.tx_sig, 'parent': parent, 'v': FRAME_VERSION},
            data=auth_data,
            headers=_get_form_headers(host, accept='text/html'),
    ) as auth_response:
        auth_response.raise_for_status()
        devices, methods, hidden_inputs = extract_devices_and_methods(auth_response.content)

    if not hidden_inputs.get('sid'):
        raise errors.DuoDecodeError('Duo frame page from {} has no sid'.format(host))

    return Challenge(session, host, devices, methods, hidden_inputs, post_action=post_action, ui=ui)


def _get_origin(host):
    return 'https://{}'.format(host)


def _get_referer(parent):
    try:
        parent_url = urlparse(parent)
    except ValueError as e:
        raise errors.BadParentURL('parent is not a valid URL: {}'.format(parent)) from e

    if not parent_url.scheme or not parent_url.hostname:
        raise errors.BadParentURL('parent must be an absolute URL, got {!r}'.format(parent))

    # userinfo is dropped, the port is kept
    host = parent_url.netloc.rpartition('@')[2]
    return '{}://{}/'.format(parent_url.scheme, host)


def _get_form_headers(host, accept='application/json'):
    return {
        'User-Agent': 'duo-frame {}'.format(version),
        'Accept': accept,
        'Origin': _get_origin(host),
        'X-Requested-With': 'XMLHttpRequest',
        'Content-Type': 'application/x-www-form-urlencoded; charset=UTF-8',
    }


class Challenge(object):
    """
       One Duo second-factor negotiation.

       A Challenge moves through three states: negotiated (returned by
       begin_challenge), method_started (start_method succeeded and a txid is
       set) and completed (a poll returned SUCCESS and the final response was
       fetched). It is single use and meant for a single owner; nothing here
       is synchronized, so share it between threads only behind a lock.
    """

    NEGOTIATED = 'negotiated'
    METHOD_STARTED = 'method_started'
    COMPLETED = 'completed'

    def __init__(self, session, host, devices, methods, hidden_inputs, post_action=None, ui=None):
        self.devices = devices
        self.methods = methods
        self.post_action = post_action
        self.ui = ui or default_ui

        self._session = session
        self._host = host
        self._hidden_inputs = hidden_inputs
        self._txid = None
        self._state = self.NEGOTIATED

    @property
    def state(self):
        return self._state

    @property
    def _sid(self):
        return self._hidden_inputs['sid']

    def find_method(self, friendly_name, device_index=None):
        """ Look up a method by name, optionally on a specific device
        :rtype: Method
        """
        for method in self.methods:
            if method.friendly_name != friendly_name:
                continue
            if device_index is not None and method.device_index != device_index:
                continue
            return method

        raise errors.MethodNotSupported('Duo method {!r} is not available{}'.format(
            friendly_name, '' if device_index is None else ' on device {}'.format(device_index)))

    def start_method(self, method, passcode=None):
        """ Trigger the out-of-band verification (push, call, passcode) for a method

        Starting a second method before completion replaces the txid, and any
        earlier attempt can no longer be polled.

        :type method: Method
        :rtype: StatusResponse
        """
        if self._state == self.COMPLETED:
            raise errors.ChallengeStateError('Challenge is already completed')
        if method not in self.methods:
            raise errors.MethodNotSupported('{} on {} is not offered by this challenge'.format(
                method.friendly_name, method.device_name))
        if self._state == self.METHOD_STARTED:
            self.ui.warning('Duo: replacing the method in progress with {}'.format(method.friendly_name))

        prompt_data = {
            'sid': self._sid,
            'device': method.device_index,
            'factor': method.friendly_name,
            'out_of_date': '',
            'days_out_of_date': '',
            'days_to_block': '',
        }
        if passcode:
            prompt_data['passcode'] = passcode

        self.ui.info('Duo: Using {} on {}...'.format(method.friendly_name, method.device_name))

        with self._post('frame/prompt', prompt_data) as prompt_response:
            txid = envelope.parse_prompt_response(prompt_response)

        self._txid = txid
        self._state = self.METHOD_STARTED

        with self._post('frame/status', {'sid': self._sid, 'txid': txid}) as status_response:
            return envelope.parse_status_response(status_response)

    def wait_for_completion(self):
        """ Check once whether the started method has been completed

        This does not loop; a result other than SUCCESS is returned to the
        caller to decide whether to poll again. See poll_until_complete.

        :return: (FinalResponse or None, ChallengeResponse)
        """
        if self._state != self.METHOD_STARTED or not self._txid:
            raise errors.ChallengeStateError(
                'wait_for_completion needs a started method, challenge is {}'.format(self._state))

        with self._post('frame/status', {'sid': self._sid, 'txid': self._txid}) as completion_response:
            challenge_response = envelope.parse_challenge_response(completion_response)

        if challenge_response.result != SUCCESS:
            return None, challenge_response

        # it worked, so do the final request
        result_url = self._get_result_url(challenge_response.result_url)
        with self._session.post(
                result_url.url,
                data={'sid': self._sid},
                headers=_get_form_headers(self._host),
        ) as final_response:
            final = envelope.parse_final_response(final_response)

        self._state = self.COMPLETED
        return final, challenge_response

    def poll_until_complete(self, interval=2, max_tries=30, sleep=time.sleep):
        """ Call wait_for_completion until Duo gives a final answer

        :return: (FinalResponse, ChallengeResponse)
        :raises DuoMfaDenied: the result was FAILURE (denied, timed out on the phone, ...)
        :raises DuoMfaTimeout: no final answer after max_tries polls
        """
        challenge_response = None
        tries = 0
        while tries < max_tries:
            if tries:
                sleep(interval)
            tries += 1

            final, challenge_response = self.wait_for_completion()
            if challenge_response.status:
                self.ui.info('status: {}'.format(challenge_response.status))

            if final is not None:
                return final, challenge_response
            if challenge_response.result == FAILURE:
                raise errors.DuoMfaDenied(challenge_response)

        raise errors.DuoMfaTimeout(challenge_response, tries)

    def _get_result_url(self, result_url):
        # result_url is a path on the challenge host, the sid must not go anywhere else
        parsed = urlparse(result_url)
        if parsed.scheme or parsed.netloc:
            raise errors.DuoDecodeError('Duo result_url {!r} is not a path on {}'.format(result_url, self._host))

        url = furl(_get_origin(self._host))
        url.path = parsed.path
        url.query = parsed.query
        return url

    def _post(self, path, data):
        url = furl(_get_origin(self._host)) / path
        return self._session.post(url.url, data=data, headers=_get_form_headers(self._host))
