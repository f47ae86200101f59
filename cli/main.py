"""Command-line entry point: generate or refine a scene and write it to disk.

Usage:
    scenegen generate -p "a red cube and a blue sphere"
    scenegen refine --script-file scene.py -p "make the cube green" --model gpt-4o
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from core.config import SceneGenConfig
from core.errors import PipelineFailure
from core.llm import DEFAULT_MODEL_ID, MODEL_CATALOG
from core.naming import available_path
from core.pipeline import GenerationRequest, ScenePipeline, build_pipeline

logger = logging.getLogger(__name__)


def build_parser(config: SceneGenConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scenegen", description="Generate 3D scenes (GLB) from text prompts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("-p", "--prompt", required=True, help="Scene description or requested change")
        sub.add_argument(
            "--model",
            default=DEFAULT_MODEL_ID,
            help=f"Model id ({', '.join(MODEL_CATALOG)}); unknown ids use the default",
        )
        sub.add_argument("--output-dir", default=config.output_dir, help="Directory for generated files")
        sub.add_argument("--save-script", action="store_true", help="Also write the generated script next to the model")

    generate = subparsers.add_parser("generate", help="Generate a new scene from a prompt")
    add_common(generate)

    refine = subparsers.add_parser("refine", help="Refine a previously generated scene script")
    refine.add_argument("--script-file", required=True, help="Path to the script to refine")
    add_common(refine)

    return parser


async def run_command(args: argparse.Namespace, pipeline: ScenePipeline) -> Path:
    """Run the parsed command and return the written asset path."""
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if args.command == "refine":
        prior_script = Path(args.script_file).read_text(encoding="utf-8")
        request = GenerationRequest.refine(prior_script, args.prompt, model_id=args.model)
    else:
        request = GenerationRequest.create(args.prompt, model_id=args.model)

    result = await pipeline.run(request, lambda name: available_path(output_dir, name))

    if args.save_script:
        script_path = result.export.path.with_suffix(".py")
        script_path.write_text(result.envelope.script, encoding="utf-8")
        logger.info(f"Script saved to {script_path}")

    return result.export.path


def main(argv: Optional[List[str]] = None, pipeline: Optional[ScenePipeline] = None) -> int:
    load_dotenv()
    config = SceneGenConfig.from_env()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = build_parser(config).parse_args(argv)
    if args.command == "refine" and not Path(args.script_file).is_file():
        print(f"Error: script file not found: {args.script_file}", file=sys.stderr)
        return 1

    pipeline = pipeline or build_pipeline(config)
    try:
        path = asyncio.run(run_command(args, pipeline))
    except PipelineFailure as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Scene saved to {path}")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
