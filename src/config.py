# MIT License
#
# Copyright (c) 2017 Matt Boyer
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from importlib import resources
import os

from xdg import BaseDirectory
import yaml

from . import _LOGGER
from . import PROJECT_NAME, BUILTIN_YAML


USER_YAML_PATH = os.path.join(
    BaseDirectory.xdg_config_home, PROJECT_NAME, BUILTIN_YAML
)

config_types = {
    'strict_cell_size': bool,
    'check_page_size': bool,
    'check_cell_content_offset': bool,
}


class DecoderConfig(dict):
    '''
    Decoder settings. The built-in defaults are always loaded; user settings
    and explicit overrides are layered on top of them.
    '''

    def __init__(self, overrides=None):
        super().__init__()
        self.load_builtin()
        if overrides:
            self._update_checked(overrides, 'override')

    @classmethod
    def from_user_config(cls, overrides=None):
        config = cls()
        config.load_user()
        if overrides:
            config._update_checked(overrides, 'override')
        return config

    def _update_checked(self, settings, source):
        for key, value in settings.items():
            try:
                expected_type = config_types[key]
            except KeyError as ex:
                raise SystemError(
                    "Malformed {} config file: unknown setting \"{}\"".format(
                        source, key
                    )
                ) from ex
            if not isinstance(value, expected_type):
                raise SystemError(
                    "Malformed {} config file: \"{}\" should be {}".format(
                        source, key, expected_type.__name__
                    )
                )
            self[key] = value

    def _load_from_yaml(self, yaml_string, source):
        if isinstance(yaml_string, bytes):
            yaml_string = yaml_string.decode('utf-8')

        raw_yaml = yaml.load(yaml_string, Loader=yaml.SafeLoader)
        if raw_yaml is None:
            return
        if not isinstance(raw_yaml, dict):
            raise SystemError("Malformed {} config file".format(source))
        self._update_checked(raw_yaml, source)
        _LOGGER.debug("Loaded %s settings: %r", source, raw_yaml)

    def load_builtin(self):
        builtin = resources.files(PROJECT_NAME).joinpath(BUILTIN_YAML)
        self._load_from_yaml(builtin.read_text(encoding='utf-8'), 'builtin')

    def load_user(self, path=None):
        if path is None:
            path = USER_YAML_PATH
        if not os.path.exists(path):
            return
        with open(path, 'r', encoding='UTF8') as user_yaml:
            self._load_from_yaml(user_yaml.read(), 'user')

    @property
    def strict_cell_size(self):
        return self['strict_cell_size']

    @property
    def check_page_size(self):
        return self['check_page_size']

    @property
    def check_cell_content_offset(self):
        return self['check_cell_content_offset']
