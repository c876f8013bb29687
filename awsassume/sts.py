"""
Source session setup, MFA prompt, the sts assume_role call and
rendering of the resulting temporary credentials.
"""

import re
import sys
import datetime
from collections import namedtuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from awsassume.exceptions import (
    ConfigurationError,
    InteractiveInputError,
    ExchangeError,
)


ROLE_SESSION_NAME = 'via-msk'
MFA_PROMPT = 'MFA code: '
EXPIRATION_FORMAT = '%Y-%m-%dT%H:%M:%SZ'
# characters still special to a shell inside double quotes
DQUOTE_SPECIAL = re.compile(r'([\\"$`])')

AssumeRoleRequest = namedtuple(
    'AssumeRoleRequest',
    'role_arn session_name duration_seconds serial_number token_code')
TemporaryCredential = namedtuple(
    'TemporaryCredential',
    'access_key_id secret_access_key session_token assumed_role_arn expiration')


def get_sts_client(log, source_profile, region_name=None):
    """
    Return an sts client bound to 'source_profile'.  Naming the profile
    explicitly keeps botocore from picking up AWS_* credentials the
    calling shell may have exported from an earlier assumed session.
    """
    log.debug("creating sts client for source profile '%s'" % source_profile)
    try:
        session = boto3.Session(profile_name=source_profile)
        return session.client('sts', region_name=region_name)
    except BotoCoreError as e:
        raise ConfigurationError(
                "cant create session for source profile '{}': {}".format(
                source_profile, e))


def read_token_code(stdin=None, stderr=None):
    """
    Prompt on stderr and read one line of MFA token code from stdin.
    """
    stdin = stdin or sys.stdin
    stderr = stderr or sys.stderr
    stderr.write(MFA_PROMPT)
    stderr.flush()
    try:
        line = stdin.readline()
    except (OSError, ValueError) as e:
        raise InteractiveInputError("cant read MFA code: {}".format(e))
    token_code = line.strip()
    if not token_code:
        raise InteractiveInputError("no MFA code entered")
    return token_code


def build_request(log, options, profile, stdin=None, stderr=None):
    """
    Assemble the AssumeRoleRequest.  The operator is prompted for an MFA
    code only when the profile has an mfa_serial and no code was given
    on the command line.
    """
    serial_number = token_code = None
    if profile.mfa_serial:
        serial_number = profile.mfa_serial
        if options.mfa_token is not None:
            token_code = options.mfa_token.strip()
            if not token_code:
                raise InteractiveInputError("empty MFA code given with --mfa-token")
        else:
            token_code = read_token_code(stdin, stderr)
    return AssumeRoleRequest(
            role_arn=profile.role_arn,
            session_name=ROLE_SESSION_NAME,
            duration_seconds=options.duration,
            serial_number=serial_number,
            token_code=token_code)


def assume_role(log, sts_client, request):
    """
    Call sts assume_role once.  Any failure is final; we never retry.
    """
    kwargs = dict(
            RoleArn=request.role_arn,
            RoleSessionName=request.session_name,
            DurationSeconds=request.duration_seconds)
    if request.serial_number:
        kwargs.update(
                SerialNumber=request.serial_number,
                TokenCode=request.token_code)
    log.info("assuming role %s for %s seconds" %
            (request.role_arn, request.duration_seconds))
    try:
        response = sts_client.assume_role(**kwargs)
    except (ClientError, BotoCoreError) as e:
        raise ExchangeError("assume_role failed: {}".format(e))
    credentials = response['Credentials']
    log.debug("assumed role user: %s" % response['AssumedRoleUser']['Arn'])
    return TemporaryCredential(
            access_key_id=credentials['AccessKeyId'],
            secret_access_key=credentials['SecretAccessKey'],
            session_token=credentials['SessionToken'],
            assumed_role_arn=response['AssumedRoleUser']['Arn'],
            expiration=credentials['Expiration'])


def format_expiration(expiration):
    """
    Returns expiration as an RFC 3339 timestamp in UTC:
    >>> format_expiration(datetime.datetime(2024, 1, 1, 1, 0,
    ...         tzinfo=datetime.timezone.utc))
    '2024-01-01T01:00:00Z'
    """
    if expiration.tzinfo is not None:
        expiration = expiration.astimezone(datetime.timezone.utc)
    return expiration.strftime(EXPIRATION_FORMAT)


def shell_escape(value):
    """
    Backslash-escape a value for use between double quotes:
    >>> shell_escape('dev$(id)')
    'dev\\\\$(id)'
    """
    return DQUOTE_SPECIAL.sub(r'\\\1', value)


def format_credentials(credential, profile_name, format_env=False):
    """
    Return the list of lines to print.  Order and variable names are
    relied upon by shell consumers; format_env only drops 'export '.
    """
    prefix = '' if format_env else 'export '
    fields = [
        ('AWS_ACCESS_KEY_ID', credential.access_key_id),
        ('AWS_SECRET_ACCESS_KEY', credential.secret_access_key),
        ('AWS_SESSION_TOKEN', credential.session_token),
        ('AWS_SECURITY_TOKEN', credential.session_token),
        ('ASSUMED_ROLE', credential.assumed_role_arn),
        ('AWS_PROFILE', profile_name),
    ]
    lines = ['{}{}="{}"'.format(prefix, name, shell_escape(value))
             for name, value in fields]
    lines.append('# this temporary credentials expire at {}'.format(
            format_expiration(credential.expiration)))
    return lines
