"""Main entry point for completing an assessment package"""

import asyncio
import argparse
import logging
from pathlib import Path

from orchestrator import Orchestrator, RunContext
from ui.progress import ConsoleProgress
from core.exceptions import CollaboratorLoadError
from config import settings


def main():
    parser = argparse.ArgumentParser(
        description="Complete an Azure AD assessment package: reports, recommendations and dashboards",
    )
    parser.add_argument("package", type=Path, help="Assessment package archive")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=settings.get_output_root(),
        help="Root directory for extracted packages"
    )
    parser.add_argument(
        "--shared-dir",
        type=Path,
        default=None,
        help="Dashboard working directory (default: <output-dir>/PowerBI)"
    )
    parser.add_argument(
        "--skip-shared-dir",
        action="store_true",
        help="Do not copy data and templates to the dashboard working directory"
    )
    parser.add_argument(
        "--generate-recommendations",
        action="store_true",
        help="Also produce the recommendations artifact"
    )
    parser.add_argument(
        "--interview-path",
        type=Path,
        default=None,
        help="Interview spreadsheet used for recommendations"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help="Logging level"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.package.exists():
        print(f"Error: Package not found: {args.package}")
        return 1

    shared_dir = args.shared_dir
    if shared_dir is None and args.output_dir != settings.get_output_root():
        shared_dir = args.output_dir / "PowerBI"

    try:
        context = RunContext.from_settings(settings, output_root=args.output_dir, shared_dir=shared_dir)
    except CollaboratorLoadError as e:
        print(f"Error: {e}")
        return 1

    orchestrator = Orchestrator(context=context, progress=ConsoleProgress())

    try:
        ctx = asyncio.run(orchestrator.run(
            args.package,
            stage_to_shared_dir=not args.skip_shared_dir,
            generate_recommendations=args.generate_recommendations,
            interview_path=args.interview_path,
        ))
    except Exception as e:
        print(f"\n✗ Assessment completion failed: {e}")
        return 1

    for advisory in ctx.advisories:
        print(f"\n! {advisory.message}")

    print(f"\n✓ Package complete ({ctx.status.value})")
    print(f"  Tenant: {ctx.manifest.tenant_domain}")
    print(f"  Output: {ctx.output_directory}")
    if ctx.recommendations and ctx.recommendations.artifact_path:
        print(f"  Recommendations: {ctx.recommendations.artifact_path}")
    if ctx.degraded:
        print(f"  Missing deliverables: {len(ctx.deliverables.failures)} (see warnings above)")

    return 0


if __name__ == "__main__":
    exit(main())
