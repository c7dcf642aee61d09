"""
cspheader CLI
"""
import argparse
import json
import sys
from pathlib import Path

import structlog
import yaml

from cspheader.config.loader import get_settings
from cspheader.config.presets import available_presets, load_preset
from cspheader.errors import CSPError
from cspheader.logging_config import setup_logging
from cspheader.models.options import Policy
from cspheader.policy.assembler import PolicyAssembler
from cspheader.policy.sources import generate_nonce

logger = structlog.get_logger()


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="cspheader - Content-Security-Policy header assembly",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render the configured default preset
  python -m cspheader render

  # Render the React preset as JSON
  python -m cspheader render --preset react --format json

  # Render a policy file with a fresh script-src nonce
  python -m cspheader render --policy policy.yaml --nonce

  # List presets
  python -m cspheader presets
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    render_parser = subparsers.add_parser('render', help='Print policy headers')
    source = render_parser.add_mutually_exclusive_group()
    source.add_argument('--preset', help='Preset name (default: CSP_PRESET)')
    source.add_argument('--policy', help='YAML file holding a single policy')
    render_parser.add_argument('--format', choices=['text', 'json'],
                               default='text', help='Output format')
    render_parser.add_argument('--nonce', action='store_true',
                               help='Add a fresh nonce to script-src')

    subparsers.add_parser('presets', help='List available presets')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    logger.debug("config_loaded", preset=settings.preset, presets_file=settings.presets_file)

    try:
        if args.command == 'render':
            return cmd_render(args)
        elif args.command == 'presets':
            return cmd_presets(args)
    except (CSPError, KeyError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _load_policy(args) -> Policy:
    if args.policy:
        with open(Path(args.policy)) as f:
            return Policy.model_validate(yaml.safe_load(f) or {})
    return load_preset(args.preset)


def cmd_render(args):
    """Execute render command"""
    policy = _load_policy(args)
    assembler = PolicyAssembler(policy.templates)
    compiled = assembler.compile(policy)

    if args.nonce:
        script_src = policy.script_src.model_copy(update={'nonce_value': generate_nonce()})
        fresh = assembler.render_dynamic({'script-src': script_src})
        headers = compiled.merge_dynamic(fresh)
    else:
        headers = compiled.headers()

    if args.format == 'json':
        print(json.dumps(headers, indent=2))
    else:
        for name, value in headers.items():
            print(f"{name}: {value}")
    return 0


def cmd_presets(args):
    """Execute presets command"""
    for name in available_presets():
        print(name)
    return 0


if __name__ == '__main__':
    sys.exit(main())
