#!/usr/bin/env python3
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
# standard imports
import json

# extras
import requests

# local imports
from . import errors, ui
from .challenge import begin_challenge
from .config import Config
from .sig_response import build_sig_response

PASSCODE_METHOD = 'Passcode'


class DuoFrameClient(object):
    """
       This is a CLI tool that completes the Duo second factor for an identity
       provider login. The identity provider's Duo.init() values (host,
       sig_request, and the page URL as parent) are passed in; the user picks a
       method, approves it, and the sig_response to post back to the identity
       provider is printed.

       Usage:
          -h, --help            show this help message and exit
          --host HOST           Duo API host
          --sig-request SIG     <tx_sig>:<app_sig>
          --parent URL          identity provider page embedding Duo
          --post-action URL     where the sig_response goes
          --method, -m METHOD   Duo method name, e.g. 'Duo Push'
          --device, -d INDEX    device index for the method
          --passcode PASSCODE   passcode for the Passcode method
          --output-format, -o   export or json
          --profile, -p         configuration profile
          --insecure, -k        Allow connections to SSL sites without cert
                                verification.
          --action-configure, -c
                                If set, will prompt user for configuration
                                parameters and then exit.
          --version             duo-frame version

        Config Options:
           host = Duo API host
           preferred_method = Duo method to pick automatically
           preferred_device = device index for preferred_method
           poll_interval = seconds between status checks
           poll_tries = status checks before giving up
           output_format = export or json
    """

    def __init__(self, ui=ui.cli):
        """
        :type ui: ui.UserInterface
        """
        self.ui = ui
        self._cache = {}

    def run(self):
        try:
            self._run()
        except errors.DuoFrameExitBase as exc:
            exc.handle(self.ui)
        except errors.DuoFrameError as exc:
            errors.DuoFrameExitError(str(exc)).handle(self.ui)

    def generate_config(self):
        self._cache['config'] = config = Config(duo_ui=self.ui)
        config.get_args()
        return config

    @property
    def config(self):
        if 'config' in self._cache:
            return self._cache['config']
        return self.generate_config()

    @property
    def settings(self):
        if 'settings' not in self._cache:
            self._cache['settings'] = self.config.get_settings()
        return self._cache['settings']

    @property
    def session(self):
        if 'session' in self._cache:
            return self._cache['session']

        session = requests.Session()
        if self.settings['insecure']:
            requests.packages.urllib3.disable_warnings()
            session.verify = False
        self._cache['session'] = session
        return session

    @property
    def challenge(self):
        if 'challenge' in self._cache:
            return self._cache['challenge']

        self.ui.info('Requesting the Duo prompt from {}...'.format(self.settings['host']))
        self._cache['challenge'] = challenge = begin_challenge(
            self.session,
            self.settings['parent'],
            self.settings['host'],
            self.settings['sig_request'],
            self.settings.get('post_action'),
            ui=self.ui,
        )
        return challenge

    def _choose_method(self, methods):
        """ gets a list of available methods and
        asks the user to select the one to use
        """
        if not methods:
            raise errors.DuoFrameExitError('No Duo methods are available for this user.')

        if len(methods) == 1:
            return methods[0]  # auto select when only 1 choice

        self.ui.message("Pick a Duo method:")
        for i, method in enumerate(methods):
            self.ui.message('[{}] {} to {}'.format(i, method.friendly_name, method.device_name))

        selection = self._get_user_int_selection(0, len(methods) - 1)

        if selection is None:
            raise errors.DuoFrameExitError("You made an invalid selection")

        return methods[selection]

    def _get_selected_method(self, challenge):
        """ select the method from the config if the challenge offers it.
        If not, present the user with a menu."""
        preferred_method = self.settings.get('preferred_method')
        if preferred_method:
            try:
                return challenge.find_method(preferred_method, self.settings.get('preferred_device') or None)
            except errors.MethodNotSupported as exc:
                self.ui.error('ERROR: {}'.format(exc))

        return self._choose_method(challenge.methods)

    def _get_user_int_selection(self, min_int, max_int, max_retries=5):
        selection = None
        for _ in range(0, max_retries):
            try:
                selection = int(self.ui.input("Selection: "))
                break
            except ValueError:
                self.ui.warning('Invalid selection, must be an integer value.')

        if selection is None:
            return None

        # make sure the choice is valid
        if selection < min_int or selection > max_int:
            return None

        return selection

    def _get_passcode(self, method):
        if method.friendly_name != PASSCODE_METHOD:
            return None
        if self.settings.get('passcode'):
            return self.settings['passcode']
        return self.ui.input('Enter the passcode for {}: '.format(method.device_name), hidden=True)

    def _run(self):
        """ Pulling it all together to make the CLI """
        self.handle_action_configure()

        challenge = self.challenge
        method = self._get_selected_method(challenge)

        status = challenge.start_method(method, passcode=self._get_passcode(method))
        if status.status:
            self.ui.info(status.status)

        try:
            final, _ = challenge.poll_until_complete(
                interval=self.settings['poll_interval'],
                max_tries=self.settings['poll_tries'],
            )
        except KeyboardInterrupt:
            self.ui.warning("User canceled waiting for Duo.")
            raise

        data = {
            'parent': final.parent,
            'post_action': self.settings.get('post_action') or '',
            'sig_response': build_sig_response(final, self.settings['sig_request']),
        }
        self.write_result_action(self.settings['output_format'], data)

        self.config.clean_up()

    def write_result_action(self, action, data):
        if action == "json":
            self.ui.result(json.dumps(data))
            return

        # Defaults to `export` format
        self.ui.result("export DUO_PARENT=" + data['parent'])
        if data['post_action']:
            self.ui.result("export DUO_POST_ACTION=" + data['post_action'])
        self.ui.result("export DUO_SIG_RESPONSE=" + data['sig_response'])

    def handle_action_configure(self):
        # Create/Update config when configure arg set
        if not self.config.action_configure:
            return
        self.config.update_config_file()
        raise errors.DuoFrameExitSuccess()
