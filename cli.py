import argparse
import json
import os
import sys
import zipfile
from pathlib import Path

from src.services.response_signaler import LOCAL_LOG_STREAM

PACKAGE_ENTRY = "package.zip"


class LocalContext:
    """Stand-in for the Lambda context when replaying events from a shell."""
    log_stream_name = LOCAL_LOG_STREAM
    function_name = "sitedeploy-local"


def _zip_directory(source_dir: Path, zip_path: Path) -> int:
    count = 0
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zipf:
        for root, _, files in os.walk(source_dir):
            for file in sorted(files):
                file_path = Path(root) / file
                zipf.write(file_path, file_path.relative_to(source_dir).as_posix())
                count += 1
    return count


def build_artifact(source_dir: str, output: str) -> Path:
    """
    Zip a built site into package.zip and wrap it in an artifact zip,
    the layout the deployment handler looks for.
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    artifact = Path(output)
    artifact.parent.mkdir(parents=True, exist_ok=True)
    package = artifact.with_name(f".{artifact.stem}-{PACKAGE_ENTRY}")
    try:
        count = _zip_directory(source, package)
        with zipfile.ZipFile(artifact, "w", zipfile.ZIP_DEFLATED) as zipf:
            zipf.write(package, PACKAGE_ENTRY)
    finally:
        if package.exists():
            package.unlink()
    print(f"Packaged {count} files into {artifact}")
    return artifact


def package_site(args):
    """
    build a deployable artifact from a local directory
    """
    try:
        build_artifact(args.source_dir, args.output or "artifact.zip")
    except Exception as e:
        print(f"An error occurred packaging the site: {e}")
        sys.exit(1)


def invoke_event(args):
    """
    replay a provisioning event through the deployment handler
    """
    from src.lambdas.site_deployment.app import lambda_handler

    try:
        with open(args.event_file) as f:
            event = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Could not read event file: {e}")
        sys.exit(1)

    try:
        result = lambda_handler(event, LocalContext())
    except Exception as e:
        print(f"Invocation failed: {e}")
        sys.exit(1)
    print(json.dumps(result, indent=2))
    if result.get("Status") != "SUCCESS":
        sys.exit(2)


def main():
    parser = argparse.ArgumentParser(
        prog='sitedeploy',
        description='Static site deployment custom resource: package build output '
        '          and replay CloudFormation events against the handler locally'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    package_parser = subparsers.add_parser(
        'package',
        help='Zip a built site into an artifact containing package.zip'
    )
    package_parser.add_argument('source_dir', help='Directory with the built site')
    package_parser.add_argument(
        '--output',
        '-o',
        help='Artifact file name (default: artifact.zip)'
    )
    package_parser.set_defaults(func=package_site)

    invoke_parser = subparsers.add_parser(
        'invoke',
        help='Run a custom resource event file through the handler'
    )
    invoke_parser.add_argument('event_file', help='Path to a JSON provisioning event')
    invoke_parser.set_defaults(func=invoke_event)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    # execute the passed function
    args.func(args)


if __name__ == '__main__':
    main()
