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
import argparse
import configparser
import os

from . import errors, version


class Config(object):
    """
       The Config Class gets the CLI arguments, reads the Duo values handed over
       by the identity provider from the environment, and reads or writes the
       duo-frame config file.
    """

    ENV_VARS = {
        'DUO_HOST': 'host',
        'DUO_SIG_REQUEST': 'sig_request',
        'DUO_PARENT': 'parent',
        'DUO_POST_ACTION': 'post_action',
        'DUO_PASSCODE': 'passcode',
    }

    DEFAULTS = {
        'host': '',
        'preferred_method': '',
        'preferred_device': '',
        'poll_interval': '2',
        'poll_tries': '30',
        'output_format': 'export',
        'insecure': 'n',
    }

    def __init__(self, duo_ui, create_config=True):
        """
        :type duo_ui: ui.UserInterface
        """
        self.ui = duo_ui
        self.FILE_ROOT = self.ui.HOME
        self.DUO_FRAME_CONFIG = self.ui.environ.get(
            'DUO_FRAME_CONFIG',
            os.path.join(self.FILE_ROOT, '.duo_frame_config')
        )
        self.conf_profile = 'DEFAULT'
        self.action_configure = False
        self.verify_ssl_certs = True
        self.host = None
        self.sig_request = None
        self.parent = None
        self.post_action = None
        self.passcode = None
        self.method = None
        self.device = None
        self.output_format = None
        self.poll_interval = None
        self.poll_tries = None

        for env_var, attr in self.ENV_VARS.items():
            if self.ui.environ.get(env_var):
                setattr(self, attr, self.ui.environ.get(env_var))

        if create_config and not os.path.isfile(self.DUO_FRAME_CONFIG):
            self.ui.notify('No duo-frame configuration file found, starting first-time configuration...')
            self.update_config_file()

    def get_args(self):
        """Get the CLI args"""
        parser = argparse.ArgumentParser(
            description="Completes a Duo second-factor challenge and prints the sig_response for the identity provider"
        )
        parser.add_argument(
            '--host',
            help="The Duo API host from the identity provider's Duo.init() call. Can also be set via DUO_HOST."
        )
        parser.add_argument(
            '--sig-request',
            help="The sig_request from Duo.init(), <tx_sig>:<app_sig>. Can also be set via DUO_SIG_REQUEST."
        )
        parser.add_argument(
            '--parent',
            help="URL of the identity provider page that embeds Duo. Can also be set via DUO_PARENT."
        )
        parser.add_argument(
            '--post-action',
            help="The post_action from Duo.init(). Can also be set via DUO_POST_ACTION."
        )
        parser.add_argument(
            '--method', '-m',
            help="The Duo method to use, e.g. 'Duo Push', 'Phone Call' or 'Passcode'. "
                 "If not provided you will be prompted to choose one."
        )
        parser.add_argument(
            '--device', '-d',
            help="Device index to use the method on, if the user has more than one device."
        )
        parser.add_argument(
            '--passcode',
            help="Passcode for the 'Passcode' method. Can also be set via DUO_PASSCODE. "
                 "If not provided you will be prompted for it."
        )
        parser.add_argument(
            '--output-format', '-o',
            choices=['export', 'json'],
            help='Print the sig_response as shell exports or as JSON.'
        )
        parser.add_argument(
            '--poll-interval', type=float,
            help='Seconds between two status checks.'
        )
        parser.add_argument(
            '--poll-tries', type=int,
            help='Number of status checks before giving up.'
        )
        parser.add_argument(
            '--profile', '-p',
            help='If set, the specified configuration profile will be used instead of the default.'
        )
        parser.add_argument(
            '--insecure', '-k',
            action='store_true',
            help='Allow connections to SSL sites without cert verification.'
        )
        parser.add_argument(
            '--action-configure', '--configure', '-c',
            action='store_true',
            help="If set, will prompt user for configuration parameters and then exit."
        )
        parser.add_argument(
            '--version', action='version',
            version='%(prog)s {}'.format(version),
            help='duo-frame version')
        args = parser.parse_args(self.ui.args)

        self.action_configure = args.action_configure

        if args.insecure is True:
            self.ui.warning("Warning: SSL certificate validation is disabled!")
            self.verify_ssl_certs = False

        for attr in ('host', 'sig_request', 'parent', 'post_action', 'passcode',
                     'method', 'device', 'output_format', 'poll_interval', 'poll_tries'):
            value = getattr(args, attr)
            if value is not None:
                setattr(self, attr, value)
        self.conf_profile = args.profile or 'DEFAULT'

    def _handle_config(self, config, profile_config, include_inherits=True):
        if "inherits" in profile_config.keys() and include_inherits:
            self.ui.message("Using inherited config: " + profile_config["inherits"])
            if profile_config["inherits"] not in config:
                raise errors.DuoFrameConfigError(
                    self.conf_profile + " inherits from " + profile_config["inherits"] +
                    ", but could not find " + profile_config["inherits"])
            combined_config = {
                **self._handle_config(config, dict(config[profile_config["inherits"]])),
                **profile_config,
            }
            del combined_config["inherits"]
            return combined_config
        else:
            return profile_config

    def get_config_dict(self, include_inherits=True):
        """returns the conf dict from the duo-frame config file"""
        if os.path.isfile(self.DUO_FRAME_CONFIG):
            config = configparser.ConfigParser()
            config.read(self.DUO_FRAME_CONFIG)

            try:
                profile_config = dict(config[self.conf_profile])
                self.fail_if_profile_not_found(profile_config, self.conf_profile, config.default_section)
                return self._handle_config(config, profile_config, include_inherits)
            except KeyError:
                if self.action_configure:
                    return {}
                raise errors.DuoFrameConfigError(
                    'Configuration profile not found! Use the --action-configure flag to generate the profile.')
        raise errors.DuoFrameConfigError('Configuration file not found! Use the --action-configure flag to generate file.')

    def get_settings(self):
        """ Merge config file, environment and CLI args; the latter two win
        :rtype: dict
        """
        settings = dict(self.DEFAULTS)
        if os.path.isfile(self.DUO_FRAME_CONFIG):
            settings.update(self.get_config_dict())

        overrides = {
            'host': self.host,
            'sig_request': self.sig_request,
            'parent': self.parent,
            'post_action': self.post_action,
            'passcode': self.passcode,
            'preferred_method': self.method,
            'preferred_device': self.device,
            'output_format': self.output_format,
            'poll_interval': self.poll_interval,
            'poll_tries': self.poll_tries,
        }
        for key, value in overrides.items():
            if value is not None:
                settings[key] = value

        if not self.verify_ssl_certs:
            settings['insecure'] = 'y'

        try:
            settings['poll_interval'] = float(settings['poll_interval'])
            settings['poll_tries'] = int(settings['poll_tries'])
        except ValueError as e:
            raise errors.DuoFrameConfigError('Invalid polling configuration: {}'.format(e))

        settings['insecure'] = str(settings['insecure']).lower() in ('y', 'true')

        for required in ('host', 'sig_request', 'parent'):
            if not settings.get(required):
                raise errors.DuoFrameConfigError(
                    '{} is required, pass --{} or set it in the environment'.format(
                        required, required.replace('_', '-')))

        return settings

    def update_config_file(self):
        """
           Prompts user for config details for duo-frame.
           Either updates existing config file or creates new one.
           Config Options:
                host = Duo API host, when it is always the same
                preferred_method = Select this Duo method automatically (Duo Push, Phone Call, Passcode)
                preferred_device = Device index to use the preferred method on
                poll_interval = Seconds between status checks (2)
                poll_tries = Status checks before giving up (30)
                output_format = export or json
        """
        config = configparser.ConfigParser()
        if self.action_configure:
            self.conf_profile = self._get_conf_profile_name(self.conf_profile)

        defaults = dict(self.DEFAULTS)

        # If a config file already exists, use its current values as defaults
        if os.path.isfile(self.DUO_FRAME_CONFIG):
            config.read(self.DUO_FRAME_CONFIG)

            if self.conf_profile in config:
                profile = config[self.conf_profile]

                for default in defaults:
                    defaults[default] = profile.get(default, defaults[default])

        config_dict = defaults
        config_dict['host'] = self._get_host_entry(defaults['host'])
        config_dict['preferred_method'] = self._get_preferred_method(defaults['preferred_method'])
        config_dict['preferred_device'] = self._get_preferred_device(defaults['preferred_device'])
        config_dict['poll_interval'] = self._get_number_entry(
            "Seconds between status checks", defaults['poll_interval'], float)
        config_dict['poll_tries'] = self._get_number_entry(
            "Status checks before giving up", defaults['poll_tries'], int)
        config_dict['output_format'] = self._get_output_format(defaults['output_format'])

        self.write_config_file(config_dict)

    def write_config_file(self, config_dict):
        config = configparser.ConfigParser()
        config.read(self.DUO_FRAME_CONFIG)
        config[self.conf_profile] = config_dict

        with open(self.DUO_FRAME_CONFIG, 'w') as configfile:
            config.write(configfile)

    def _get_host_entry(self, default_entry):
        """ Get the Duo API host """
        self.ui.message(
            "Enter the Duo API host if it is always the same, e.g. api-1234abcd.duosecurity.com\n"
            "This is optional, it is usually passed with --host.")
        return self._get_user_input("Duo API host", default_entry).strip('/')

    def _get_preferred_method(self, default_entry):
        """Get the user's preferred Duo method [Optional]"""
        self.ui.message(
            "If you'd like to use the same Duo method every time, enter its name here.\n"
            "This is optional. Usual names: Duo Push, Phone Call, Passcode")
        return self._get_user_input("Preferred Duo method", default_entry)

    def _get_preferred_device(self, default_entry):
        """Get the device index for the preferred method [Optional]"""
        self.ui.message(
            "If you have more than one device, enter the index of the one to use.\n"
            "This is optional, the first device offering the method is used otherwise.")
        return self._get_user_input("Preferred device index", default_entry)

    def _get_number_entry(self, message, default_entry, number_type):
        while True:
            value = self._get_user_input(message, default_entry)
            try:
                number_type(value)
                return value
            except ValueError:
                self.ui.warning("{} must be a number.".format(message))

    def _get_output_format(self, default_entry):
        """Get the user's preferred output format [Optional]"""
        self.ui.message("Set the tools' output format:[export, json]")
        output_format = None
        while output_format not in ('export', 'json'):
            output_format = self._get_user_input(
                "Preferred output format", default_entry)
        return output_format

    def _get_conf_profile_name(self, default_entry):
        """Get and validate configuration profile name. [Optional]"""
        self.ui.message(
            "If you'd like to assign the duo-frame configuration to a specific profile\n"
            "instead of to the default profile, specify the name of the profile.\n"
            "This is optional.")
        return self._get_user_input("Configuration Profile Name", default_entry)

    def _get_user_input(self, message, default=None):
        """formats message to include default and then prompts user for input
        via keyboard with message. Returns user's input or if user doesn't
        enter input will return the default."""
        if default and default != '':
            prompt_message = message + " [{}]: ".format(default)
        else:
            prompt_message = message + ': '

        user_input = self.ui.input(prompt_message)
        if user_input:
            return user_input
        return default

    def clean_up(self):
        """ clean up secret stuff"""
        del self.sig_request
        del self.passcode

    def fail_if_profile_not_found(self, profile_config, conf_profile, default_section):
        """
        When a users profile does not have a profile named 'DEFAULT' configparser fails to throw
        an exception. This will raise an exception that handles this case and provide better messaging
        to the user why the failure occurred.
        """
        if not profile_config and conf_profile == default_section:
            raise errors.DuoFrameConfigError(
                'DEFAULT profile is missing! This is profile is required when not using --profile')
