"""
Validator schema data for the awsassume config file and for the
target profile read from the shared aws config.
"""
import yaml

from cerberus import Validator


# Schema for the optional awsassume config file.  Every key is optional;
# cli options take precedence over anything set here.
#
CONFIG_FILE_SCHEMA = """
source_profile:
  required: False
  type: string
  empty: False
duration:
  required: False
  type:
  - string
  - integer
format_env:
  required: False
  type: boolean
region:
  required: False
  type: string
  empty: False
"""

# Schema for the scoped config of the target profile.  Shared config
# profiles carry plenty of keys we do not care about.
#
PROFILE_SCHEMA = """
role_arn:
  required: True
  type: string
  empty: False
mfa_serial:
  required: False
  type: string
  empty: False
source_profile:
  required: False
  type: string
  empty: False
"""


def config_file_validator(log):
    vconfig = Validator(yaml.safe_load(CONFIG_FILE_SCHEMA))
    log.debug("config_file_validator_schema: {}".format(vconfig.schema))
    return vconfig


def profile_validator(log):
    vprofile = Validator(yaml.safe_load(PROFILE_SCHEMA), allow_unknown=True)
    log.debug("profile_validator_schema: {}".format(vprofile.schema))
    return vprofile
