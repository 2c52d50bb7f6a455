"""Test configuration and fixtures for fimdiff."""

import pytest

SYSCHECK_CONF = """<?xml version="1.0"?>
<ossec_config>
  <syscheck>
    <directories>/etc,/usr/bin</directories>
    <nodiff>/etc/ssl/private.key</nodiff>
    <nodiff type="sregex">.test$</nodiff>
  </syscheck>
</ossec_config>
"""


@pytest.fixture
def syscheck_conf(tmp_path):
    """Agent configuration with one literal and one simple-regex nodiff entry."""
    path = tmp_path / "test_syscheck.conf"
    path.write_text(SYSCHECK_CONF)
    return path
