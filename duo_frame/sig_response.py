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
from . import errors
from .common import SignedRequest


def check_parent(final, expected_prefix):
    """ Make sure the Duo cookie belongs to the identity provider we are logging in to
    :type final: FinalResponse
    :param expected_prefix: base URL of the identity provider
    """
    if not final.parent or not final.parent.startswith(expected_prefix):
        raise errors.BadParent('Duo response is for {!r}, expected a parent under {!r}'.format(
            final.parent, expected_prefix))


def build_sig_response(final, sig_request):
    """ "<cookie>:<app_sig>", the value the identity provider expects back as sig_response
    :type final: FinalResponse
    :param sig_request: the original sig_request, str or SignedRequest
    """
    if not isinstance(sig_request, SignedRequest):
        sig_request = SignedRequest.parse(sig_request)
    return '{}:{}'.format(final.cookie, sig_request.app_sig)


def build_completion_form(final, sig_request, **extra_fields):
    """ Form data to POST to final.parent to finish the identity provider login """
    form_data = dict(extra_fields)
    form_data['sig_response'] = build_sig_response(final, sig_request)
    return form_data
