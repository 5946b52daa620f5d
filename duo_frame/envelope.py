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

Decoding of the Duo frame JSON responses. Every endpoint answers with

    {"stat": "OK", "response": {...}}

and anything but stat == OK is treated as an opaque server error.
"""
from . import errors
from .common import ChallengeResponse, FinalResponse, StatusResponse

STAT_OK = 'OK'


def unwrap(response):
    """ Return the payload of a Duo response, or raise if it is not an OK envelope
    :type response: requests.Response
    :rtype: dict
    """
    try:
        data = response.json()
    except ValueError as e:
        raise errors.DuoDecodeError('Duo response from {} is not JSON: {}'.format(response.url, e)) from e

    if not isinstance(data, dict) or 'stat' not in data:
        raise errors.DuoDecodeError('Duo response from {} has no stat'.format(response.url))

    if data['stat'] != STAT_OK:
        raise errors.DuoServerError(data['stat'])

    payload = data.get('response')
    if not isinstance(payload, dict):
        raise errors.DuoDecodeError('Duo response from {} has no response payload'.format(response.url))
    return payload


def _field(payload, name):
    value = payload.get(name)
    return '' if value is None else value


def parse_prompt_response(response):
    """ /frame/prompt -> txid """
    payload = unwrap(response)
    txid = payload.get('txid')
    if not txid:
        raise errors.DuoDecodeError('Duo prompt response has no txid')
    return txid


def parse_status_response(response):
    payload = unwrap(response)
    return StatusResponse(status_code=_field(payload, 'status_code'),
                          status=_field(payload, 'status'))


def parse_challenge_response(response):
    payload = unwrap(response)
    return ChallengeResponse(
        status_code=_field(payload, 'status_code'),
        result=_field(payload, 'result'),
        result_url=_field(payload, 'result_url'),
        parent=_field(payload, 'parent'),
        reason=_field(payload, 'reason'),
        status=_field(payload, 'status'),
    )


def parse_final_response(response):
    payload = unwrap(response)
    return FinalResponse(parent=_field(payload, 'parent'),
                         cookie=_field(payload, 'cookie'))
