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
import html5lib

from .common import Device, Method

FACTOR_INPUT = 'factor'


def extract_devices_and_methods(content):
    """ Pull the devices, methods and hidden form state out of the Duo frame page

    The page has one hidden <fieldset data-device-index="..."> per device holding
    <input type="hidden" name="factor"> entries, and a <select name="device">
    mapping device index to label.

    :param content: page body, bytes or str
    :return: (devices, methods, hidden_inputs)
    """
    doc = html5lib.parse(content, namespaceHTMLElements=False)

    factors_by_device = _get_factors_by_device(doc)
    hidden_inputs = _get_hidden_inputs(doc)
    devices = _get_devices(doc)

    methods = []
    for device in devices:
        for factor in factors_by_device.get(device.index, []):
            methods.append(Method(friendly_name=factor,
                                  device_name=device.friendly_name,
                                  device_index=device.index))

    return devices, methods, hidden_inputs


def _is_hidden_input(field):
    return (field.get('type') or '').lower() == 'hidden' and field.get('name') is not None


def _get_factors_by_device(doc):
    factors_by_device = {}
    for fieldset in doc.iterfind('.//fieldset[@data-device-index]'):
        # a later fieldset for the same device replaces the earlier one
        factors = factors_by_device[fieldset.get('data-device-index')] = []
        for field in fieldset.iterfind('.//input'):
            if _is_hidden_input(field) and field.get('name') == FACTOR_INPUT:
                factors.append(field.get('value') or '')
    return factors_by_device


def _get_hidden_inputs(doc):
    # Everything except the factors is form state Duo expects back, sid included
    hidden_inputs = {}
    for field in doc.iterfind('.//input'):
        if _is_hidden_input(field) and field.get('name') != FACTOR_INPUT:
            hidden_inputs.setdefault(field.get('name'), field.get('value') or '')
    return hidden_inputs


def _get_devices(doc):
    select = doc.find('.//select[@name="device"]')
    if select is None:
        return []

    devices = []
    for option in select.iterfind('.//option'):
        index = option.get('value')
        if not index:
            continue
        devices.append(Device(index=index, friendly_name=(option.text or '').strip()))
    return devices
