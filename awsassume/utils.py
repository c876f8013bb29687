"""Utility functions used by the various awsassume modules"""

import re
import sys
import logging
from collections import namedtuple

import yaml

from awsassume.exceptions import UsageError, ValidationError


# Go style duration literal: '1h30m', '90m', '3600s', '1.5h', '500ms'
DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'μs': 1e-6,
    'ms': 1e-3,
    's': 1,
    'm': 60,
    'h': 3600,
}
DURATION_PART = re.compile(r'([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)')

Arn = namedtuple('Arn', 'partition service region account_id resource')


def get_logger(args):
    """
    Setup logging.basicConfig from args.
    Return logging.Logger object.

    Log records go to stderr.  stdout carries nothing but the
    credential lines the calling shell evaluates.
    """
    # log level
    log_level = logging.INFO
    if args['--verbose']:
        log_level = logging.DEBUG
    if args['--quiet']:
        log_level = logging.CRITICAL
    # log format
    log_format = '%(name)s: %(levelname)-9s%(message)s'
    if args['--verbose']:
        log_format = '%(name)s: %(levelname)-9s%(funcName)s():  %(message)s'
    if args['--verbose'] < 2:
        logging.getLogger('botocore').propagate = False
        logging.getLogger('boto3').propagate = False
    logging.basicConfig(stream=sys.stderr, format=log_format, level=log_level)
    log = logging.getLogger(__name__)
    return log


def yamlfmt(dict_obj):
    """Convert a dictionary object into a yaml formated string"""
    return yaml.dump(dict_obj, default_flow_style=False)


def parse_duration(value):
    """
    Return whole seconds for a duration given as a Go style literal
    ('1h30m', '90m', '3600s') or as a bare integer number of seconds.
    Fractional seconds are truncated.
    """
    if isinstance(value, bool):
        raise UsageError("invalid duration: '{}'".format(value))
    if isinstance(value, int):
        seconds = value
    else:
        text = str(value).strip()
        if re.fullmatch(r'[0-9]+', text):
            seconds = int(text)
        else:
            sign = 1
            if text[:1] in ('+', '-'):
                if text[0] == '-':
                    sign = -1
                text = text[1:]
            total = 0.0
            pos = 0
            for match in DURATION_PART.finditer(text):
                if match.start() != pos:
                    break
                total += float(match.group(1)) * DURATION_UNITS[match.group(2)]
                pos = match.end()
            if not text or pos != len(text):
                raise UsageError("invalid duration: '{}'".format(value))
            seconds = sign * int(total)
    if seconds <= 0:
        raise UsageError("duration must be at least one second: '{}'".format(value))
    return seconds


def parse_arn(arn):
    """
    Split an ARN string into its sections.  Raise ValidationError
    unless it looks like 'arn:partition:service:region:account:resource'.
    """
    sections = arn.split(':', 5)
    if len(sections) != 6:
        raise ValidationError("arn: not enough sections: '{}'".format(arn))
    if sections[0] != 'arn':
        raise ValidationError("arn: invalid prefix: '{}'".format(arn))
    if not sections[1]:
        raise ValidationError("arn: invalid partition: '{}'".format(arn))
    if not sections[2]:
        raise ValidationError("arn: invalid service: '{}'".format(arn))
    if not sections[5]:
        raise ValidationError("arn: invalid resource: '{}'".format(arn))
    return Arn(*sections[1:])


def resource_type(arn):
    """
    Returns the resource type of a parsed Arn:
    >>> resource_type(parse_arn('arn:aws:iam::111122223333:role/Dev'))
    'role'
    """
    return re.split(r'[/:]', arn.resource, maxsplit=1)[0]


def is_iam_resource(arn, rtype):
    """Test if parsed Arn is an iam resource of type 'rtype'"""
    return arn.service == 'iam' and resource_type(arn) == rtype
