#!/usr/bin/env python
"""Exchange a source profile for temporary assume_role credentials.

Prints shell statements on stdout.  Typical use:

  eval "$(awsassume dev)"
  awsassume --format-env dev > .env

Usage:
  awsassume PROFILE [--source-profile NAME]
                    [--duration DURATION]
                    [--format-env]
                    [--region REGION]
                    [--mfa-token CODE]
                    [--config FILE]
                    [-q] [-v|-vv]
  awsassume (--help|--version)

Options:
  PROFILE                     Name of the profile in ~/.aws/config to assume.
  -h, --help                  Show this help message and exit.
  -V, --version               Display version info and exit.
  -s, --source-profile NAME   Profile whose credentials make the sts call.
                              Defaults to the profile's source_profile, then
                              'default'.
  -d, --duration DURATION     Session lifetime, e.g. 1h30m, 900s or 3600.
                              Defaults to 1h.
  -e, --format-env            Print NAME="value" lines without 'export'.
  -r, --region REGION         AWS region of the sts endpoint.
  -m, --mfa-token CODE        MFA token code.  Prompted for when the profile
                              has an mfa_serial and this is not given.
  --config FILE               awsassume config file in yaml format.  Defaults
                              to $AWSASSUME_CONFIG or ~/.awsassume/config.yaml.
  -q, --quiet                 Repress log output.
  -v, --verbose               Increase log level to 'DEBUG'.
  -vv                         Include botocore and boto3 logs in log stream.

"""

import sys

from docopt import docopt

import awsassume
from awsassume.utils import get_logger
from awsassume.config import (
    scan_config_file,
    load_profile,
    validate_profile,
    load_config,
)
from awsassume.sts import (
    get_sts_client,
    build_request,
    assume_role,
    format_credentials,
)
from awsassume.exceptions import AssumeError


# single dash spellings of long options, kept for existing scripts
SINGLE_DASH_OPTIONS = {
    '-format-env': '--format-env',
    '-source-profile': '--source-profile',
    '-source-profle': '--source-profile',
    '-help': '--help',
}


def run(log, args):
    """
    Resolve, validate, prompt, exchange.  Returns the output lines;
    nothing is printed until every step has succeeded.
    """
    config = scan_config_file(log, args)
    profile = load_profile(log, args['PROFILE'])
    validate_profile(log, profile)
    options = load_config(log, args, config, profile)
    sts_client = get_sts_client(log, options.source_profile, options.region)
    request = build_request(log, options, profile)
    credential = assume_role(log, sts_client, request)
    return format_credentials(credential, options.profile, options.format_env)


def double_dash(argv):
    """Rewrite '-format-env' style options to their '--' form."""
    rewritten = []
    for i, arg in enumerate(argv):
        if arg == '--':
            return rewritten + list(argv[i:])
        option, sep, value = arg.partition('=')
        if option in SINGLE_DASH_OPTIONS:
            arg = SINGLE_DASH_OPTIONS[option] + sep + value
        rewritten.append(arg)
    return rewritten


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    args = docopt(__doc__, argv=double_dash(argv), version=awsassume.__version__)
    log = get_logger(args)
    log.debug("%s: args:\n%s" % (__name__, dict(args, **{'--mfa-token': None})))
    try:
        lines = run(log, args)
    except AssumeError as e:
        log.critical(e)
        sys.exit(1)
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
