"""Unit tests for duo_frame.config.Config"""
import argparse
import os
import unittest
from unittest.mock import patch

from duo_frame import errors
from duo_frame.config import Config
from tests.user_interface_mock import MockUserInterface


class TestConfig(unittest.TestCase):
    """Class to test Config Class.
       Mock is used to mock external calls"""

    def setUp(self):
        """Set up for the unit tests"""
        self.config = Config(duo_ui=MockUserInterface(), create_config=False)

    @patch(
        "argparse.ArgumentParser.parse_args",
        return_value=argparse.Namespace(
            host="api-1234abcd.duosecurity.com",
            sig_request="TX|abc:APP|def",
            parent="https://idp.example.edu/sso",
            post_action=None,
            method="Duo Push",
            device=None,
            passcode=None,
            output_format=None,
            poll_interval=None,
            poll_tries=None,
            profile=None,
            insecure=False,
            action_configure=False,
        ),
    )
    def test_get_args(self, mock_arg):
        """Test to make sure the Duo values get picked up"""
        self.config.get_args()
        self.assertEqual(self.config.host, "api-1234abcd.duosecurity.com")
        self.assertEqual(self.config.sig_request, "TX|abc:APP|def")
        self.assertEqual(self.config.method, "Duo Push")
        self.assertEqual(self.config.conf_profile, "DEFAULT")
        self.assertTrue(self.config.verify_ssl_certs)

    def test_environment(self):
        test_ui = MockUserInterface(environ={
            'DUO_HOST': 'api-env.duosecurity.com',
            'DUO_SIG_REQUEST': 'TX|env:APP|env',
            'DUO_PARENT': 'https://idp.example.edu/sso',
            'DUO_PASSCODE': '123456',
        })
        config = Config(duo_ui=test_ui, create_config=False)
        self.assertEqual(config.host, 'api-env.duosecurity.com')
        self.assertEqual(config.sig_request, 'TX|env:APP|env')
        self.assertEqual(config.passcode, '123456')

    def test_args_override_environment(self):
        test_ui = MockUserInterface(
            environ={'DUO_HOST': 'api-env.duosecurity.com'},
            argv=['duo-frame', '--host', 'api-arg.duosecurity.com', '--insecure', '--poll-tries', '5'],
        )
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        self.assertEqual(config.host, 'api-arg.duosecurity.com')
        self.assertEqual(config.poll_tries, 5)
        self.assertFalse(config.verify_ssl_certs)
        assert "Warning: SSL certificate validation is disabled!" in test_ui.notifications

    def test_read_config(self):
        """Test to make sure getting config works"""
        test_ui = MockUserInterface(argv=["duo-frame", "--profile", "myprofile"])
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("""
[myprofile]
preferred_method = Duo Push
""")
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        profile_config = config.get_config_dict()
        self.assertEqual(profile_config, {"preferred_method": "Duo Push"})

    def test_read_nested_config_inherited(self):
        """Test to make sure getting config works when inherited"""
        test_ui = MockUserInterface(argv=["duo-frame", "--profile", "myprofile"])
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("""
[mybase-level1]
host = api-base.duosecurity.com
[mybase-level2]
inherits = mybase-level1
poll_tries = 10
[myprofile]
inherits = mybase-level2
preferred_method = Phone Call
""")
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        profile_config = config.get_config_dict()
        self.assertEqual(profile_config, {
            "host": "api-base.duosecurity.com",
            "poll_tries": "10",
            "preferred_method": "Phone Call",
        })

    def test_missing_inherited_profile(self):
        test_ui = MockUserInterface()
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("""
[myprofile]
inherits = nowhere
""")
        config = Config(duo_ui=test_ui, create_config=False)
        config.conf_profile = "myprofile"
        self.assertRaises(errors.DuoFrameConfigError, config.get_config_dict)

    def test_fail_if_profile_not_found(self):
        """Test to make sure missing Default fails properly"""
        test_ui = MockUserInterface()
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("""
[myprofile]
host = api-1234abcd.duosecurity.com
""")
        config = Config(duo_ui=test_ui, create_config=False)
        config.conf_profile = "DEFAULT"
        with self.assertRaises(errors.DuoFrameConfigError) as context:
            config.get_config_dict()
        self.assertEqual('DEFAULT profile is missing! This is profile is required when not using --profile',
                         context.exception.message)

    def test_get_settings(self):
        test_ui = MockUserInterface(
            environ={'DUO_SIG_REQUEST': 'TX|abc:APP|def', 'DUO_PARENT': 'https://idp.example.edu/sso'},
            argv=['duo-frame', '--method', 'Phone Call'],
        )
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("""
[DEFAULT]
host = api-1234abcd.duosecurity.com
preferred_method = Duo Push
poll_interval = 1.5
""")
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        settings = config.get_settings()

        self.assertEqual(settings['host'], 'api-1234abcd.duosecurity.com')
        self.assertEqual(settings['preferred_method'], 'Phone Call')
        self.assertEqual(settings['poll_interval'], 1.5)
        self.assertEqual(settings['poll_tries'], 30)
        self.assertEqual(settings['output_format'], 'export')
        self.assertFalse(settings['insecure'])

    def test_get_settings_without_config_file(self):
        test_ui = MockUserInterface(argv=['duo-frame', '--host', 'api-1234abcd.duosecurity.com',
                                          '--sig-request', 'TX|abc:APP|def',
                                          '--parent', 'https://idp.example.edu/sso'])
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        settings = config.get_settings()
        self.assertEqual(settings['sig_request'], 'TX|abc:APP|def')

    def test_get_settings_missing_required(self):
        test_ui = MockUserInterface(argv=['duo-frame', '--host', 'api-1234abcd.duosecurity.com'])
        config = Config(duo_ui=test_ui, create_config=False)
        config.get_args()
        with self.assertRaises(errors.DuoFrameConfigError) as context:
            config.get_settings()
        self.assertIn('sig_request', context.exception.message)

    def test_get_settings_bad_poll_interval(self):
        test_ui = MockUserInterface(environ={'DUO_HOST': 'h', 'DUO_SIG_REQUEST': 'a:b', 'DUO_PARENT': 'https://p/'})
        with open(test_ui.HOME + "/.duo_frame_config", "w") as config_file:
            config_file.write("[DEFAULT]\npoll_interval = soon\n")
        config = Config(duo_ui=test_ui, create_config=False)
        self.assertRaises(errors.DuoFrameConfigError, config.get_settings)

    def test_first_time_configuration(self):
        test_ui = MockUserInterface(inputs=['api-1234abcd.duosecurity.com', 'Duo Push', '', '', '', 'json'])
        Config(duo_ui=test_ui)

        config = Config(duo_ui=test_ui, create_config=False)
        self.assertTrue(os.path.isfile(config.DUO_FRAME_CONFIG))
        self.assertEqual(config.get_config_dict(), {
            'host': 'api-1234abcd.duosecurity.com',
            'preferred_method': 'Duo Push',
            'preferred_device': '',
            'poll_interval': '2',
            'poll_tries': '30',
            'output_format': 'json',
            'insecure': 'n',
        })

    def test_clean_up(self):
        self.config.sig_request = 'TX|abc:APP|def'
        self.config.clean_up()
        self.assertFalse(hasattr(self.config, 'sig_request'))
        self.assertFalse(hasattr(self.config, 'passcode'))
