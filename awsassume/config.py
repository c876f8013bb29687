import os
from collections import namedtuple

import yaml
import botocore.session
from botocore.exceptions import BotoCoreError

from awsassume.utils import yamlfmt, parse_duration, parse_arn, is_iam_resource
from awsassume.validator import config_file_validator, profile_validator
from awsassume.exceptions import (
    ConfigurationError,
    ValidationError,
    InvalidRoleConfiguration,
    InvalidMfaConfiguration,
)

# Config parser defaults
DEFAULT_CONFIG_FILE = '~/.awsassume/config.yaml'
CONFIG_FILE_ENV = 'AWSASSUME_CONFIG'
DEFAULT_SOURCE_PROFILE = 'default'
DEFAULT_DURATION = 3600

Options = namedtuple(
    'Options', 'profile source_profile duration format_env region mfa_token')
ProfileConfig = namedtuple(
    'ProfileConfig', 'name role_arn mfa_serial source_profile')


def scan_config_file(log, args):
    """
    Load the awsassume config file.  A missing default config file
    is not an error; a missing file named with --config or
    AWSASSUME_CONFIG is.
    """
    config_file = args['--config'] or os.environ.get(CONFIG_FILE_ENV)
    explicit = bool(config_file)
    if not explicit:
        config_file = DEFAULT_CONFIG_FILE
    config_file = os.path.expanduser(config_file)
    if not os.path.isfile(config_file):
        if explicit:
            raise ConfigurationError("config_file not found: {}".format(config_file))
        log.debug("no config file at {}, using defaults".format(config_file))
        return {}
    log.debug("loading config file: {}".format(config_file))
    with open(config_file) as f:
        try:
            config = yaml.safe_load(f.read())
        except (yaml.YAMLError, UnicodeDecodeError):
            raise ConfigurationError("{} not a valid yaml file".format(config_file))
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError("{} must contain a yaml mapping".format(config_file))
    validator = config_file_validator(log)
    if not validator.validate(config):
        log.debug("validator errors:\n{}".format(yamlfmt(validator.errors)))
        raise ConfigurationError("schema validation failed for config_file {}: {}".format(
                config_file, validator.errors))
    log.debug("config: {}".format(config))
    return config


def load_profile(log, profile_name):
    """
    Return a ProfileConfig for 'profile_name' from the shared aws
    config files.
    """
    log.debug("loading profile: {}".format(profile_name))
    try:
        scoped_config = botocore.session.Session(
                profile=profile_name).get_scoped_config()
    except BotoCoreError as e:
        raise ConfigurationError("cant load profile '{}': {}".format(profile_name, e))
    validator = profile_validator(log)
    if not validator.validate(scoped_config):
        log.debug("validator errors:\n{}".format(yamlfmt(validator.errors)))
        if 'role_arn' in validator.errors:
            raise ConfigurationError(
                    "profile '{}' has no usable role_arn".format(profile_name))
        raise ConfigurationError("profile '{}' is malformed: {}".format(
                profile_name, validator.errors))
    return ProfileConfig(
            name=profile_name,
            role_arn=scoped_config['role_arn'],
            mfa_serial=scoped_config.get('mfa_serial'),
            source_profile=scoped_config.get('source_profile'))


def validate_profile(log, profile):
    """
    Fail fast on a role_arn or mfa_serial that is not an iam role or
    mfa device.  Either a wrong service or a wrong resource type is
    rejected.
    """
    try:
        role_arn = parse_arn(profile.role_arn)
    except ValidationError as e:
        raise InvalidRoleConfiguration(
                "invalid role_arn in profile '{}': {}".format(profile.name, e))
    if not is_iam_resource(role_arn, 'role'):
        raise InvalidRoleConfiguration("invalid role_arn in profile '{}': {}".format(
                profile.name, profile.role_arn))
    log.debug("role_arn: {}".format(role_arn))
    if profile.mfa_serial is None:
        return
    try:
        mfa_arn = parse_arn(profile.mfa_serial)
    except ValidationError as e:
        raise InvalidMfaConfiguration(
                "invalid mfa_serial in profile '{}': {}".format(profile.name, e))
    if not is_iam_resource(mfa_arn, 'mfa'):
        raise InvalidMfaConfiguration("invalid mfa_serial in profile '{}': {}".format(
                profile.name, profile.mfa_serial))
    log.debug("mfa_serial: {}".format(mfa_arn))


def get_source_profile(log, args, config, profile):
    """
    Determine the source profile.  Try in order:
    cli option, target profile's source_profile, config file,
    DEFAULT_SOURCE_PROFILE.
    """
    if args['--source-profile']:
        source_profile = args['--source-profile']
    elif profile.source_profile:
        source_profile = profile.source_profile
    elif config.get('source_profile'):
        source_profile = config['source_profile']
    else:
        source_profile = DEFAULT_SOURCE_PROFILE
    log.debug("source_profile: %s" % source_profile)
    return source_profile


def get_duration(log, args, config):
    """
    Determine the session duration in seconds.  Try in order:
    cli option, config file, DEFAULT_DURATION.
    """
    if args['--duration']:
        duration = parse_duration(args['--duration'])
    elif config.get('duration') is not None:
        duration = parse_duration(config['duration'])
    else:
        duration = DEFAULT_DURATION
    log.debug("duration: %s" % duration)
    return duration


def load_config(log, args, config, profile):
    """
    Assemble options from cli args, config file params, the target
    profile and defaults into one immutable Options tuple.
    """
    options = Options(
            profile=profile.name,
            source_profile=get_source_profile(log, args, config, profile),
            duration=get_duration(log, args, config),
            format_env=bool(args['--format-env'] or config.get('format_env')),
            region=args['--region'] or config.get('region'),
            mfa_token=args['--mfa-token'])
    log.debug("options: {}".format(options._replace(mfa_token=None)))
    return options
