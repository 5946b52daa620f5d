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
import builtins
import getpass
import os
import sys


class UserInterface:
    """
       Everything duo_frame tells the user goes through here: progress and
       status text from Duo, warnings, prompts, and the final result line.
    """

    def __init__(self, environ=os.environ, argv=None):
        if argv is None:
            argv = sys.argv

        self.environ = environ.copy()
        self.argv = argv[:]
        self.args = self.argv[1:]
        self.HOME = self.environ.get('HOME') or os.path.expanduser('~')

    def result(self, result):
        """writes a result line (the export lines or the JSON document) for the caller to consume
        :type result: str
        """
        raise NotImplementedError()

    def prompt(self, message):
        """shows the question for a menu choice, a config value or a passcode, without reading the answer
        :type message: str
        """
        raise NotImplementedError()

    def message(self, message):
        """shows a line of an interactive exchange, such as a method menu entry
        :type message: str
        """
        raise NotImplementedError()

    def read_input(self, hidden=False):
        """reads one answer from the user, hidden for passcodes
        :rtype: str
        """
        raise NotImplementedError()

    def notify(self, message):
        """reports progress, Duo status text and errors, never part of the result
        :type message: str
        """
        raise NotImplementedError()

    def input(self, message=None, hidden=False):
        """asks a question and returns the answer, see prompt() and read_input()
        :type message: str
        :rtype: str
        """
        self.prompt(message)
        return self.read_input(hidden)

    def info(self, message):
        self.notify(message)

    def warning(self, message):
        self.notify(message)

    def error(self, message):
        self.notify(message)


class CLIUserInterface(UserInterface):
    def result(self, result):
        builtins.print(result, file=sys.stdout)

    def prompt(self, message=None):
        if message is not None:
            builtins.print(message, file=sys.stderr, end='')
            sys.stderr.flush()

    def message(self, message):
        builtins.print(message, file=sys.stderr)

    def read_input(self, hidden=False):
        return getpass.getpass('') if hidden else builtins.input()

    def notify(self, message):
        builtins.print(message, file=sys.stderr)


cli = CLIUserInterface()
default = cli
