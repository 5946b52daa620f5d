"""Unit tests for duo_frame.sig_response and SignedRequest"""
import unittest

from duo_frame import errors
from duo_frame.common import FinalResponse, SignedRequest
from duo_frame.sig_response import build_completion_form, build_sig_response, check_parent


class TestSignedRequest(unittest.TestCase):
    def test_parse(self):
        signed_request = SignedRequest.parse('abc:def')
        self.assertEqual(signed_request.tx_sig, 'abc')
        self.assertEqual(signed_request.app_sig, 'def')
        self.assertEqual(str(signed_request), 'abc:def')

    def test_parse_malformed(self):
        for sig_request in ('abc', 'abc:def:ghi', '', None):
            with self.assertRaises(errors.MalformedSignedRequest):
                SignedRequest.parse(sig_request)

    def test_malformed_is_a_value_error(self):
        self.assertRaises(ValueError, SignedRequest.parse, 'no-colon')


class TestSigResponse(unittest.TestCase):
    def setUp(self):
        self.final = FinalResponse(parent='https://idp.example.edu/idp/profile/SAML2/Redirect/SSO',
                                   cookie='AUTH|cookie')

    def test_build_sig_response_uses_app_sig(self):
        self.assertEqual(build_sig_response(self.final, 'abc:def'), 'AUTH|cookie:def')
        self.assertEqual(build_sig_response(self.final, SignedRequest('abc', 'def')), 'AUTH|cookie:def')

    def test_build_completion_form(self):
        form = build_completion_form(self.final, 'abc:def', conversation='e1s2')
        self.assertEqual(form, {'conversation': 'e1s2', 'sig_response': 'AUTH|cookie:def'})

    def test_check_parent(self):
        check_parent(self.final, 'https://idp.example.edu/')

    def test_check_parent_mismatch(self):
        self.assertRaises(errors.BadParent, check_parent, self.final, 'https://idp.other.edu/')
        self.assertRaises(errors.BadParent, check_parent,
                          FinalResponse(parent='', cookie='AUTH|cookie'), 'https://idp.example.edu/')
