"""
Console front end for DecisionWise.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from decisionwise.config import Configuration
from decisionwise.decision_service import DecisionClient, DecisionSession
from decisionwise.flows import best_option_flow, summarize_flow
from decisionwise.llm import DecisionWiseError, LLMClient, ProviderConfig
from decisionwise.logging_utils import configure_logging

logger = structlog.get_logger(__name__)


async def read_options() -> list[str]:
    """Read options from stdin, one per line, until a blank line or EOF."""
    print("What are your options? Enter one per line, blank line to finish.")
    options: list[str] = []
    while True:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line or not line.strip():
            return options
        options.append(line.rstrip("\n"))


def print_error(session: DecisionSession) -> None:
    if session.error:
        print(f"{session.error.title}: {session.error.description}")


async def run(config: Configuration, summarize: bool) -> int:
    provider_config = ProviderConfig.from_config(
        config.get_llm_config(),
        config.get_http_client_config(),
        config.llm_api_key,
    )

    async with LLMClient(provider_config) as llm_client:
        client = DecisionClient(
            best_option_flow(llm_client), summarize_flow(llm_client)
        )
        session = DecisionSession(client)

        while True:
            options = await read_options()
            if not options:
                return 0

            if summarize:
                try:
                    summary = await client.summarize(options)
                except DecisionWiseError as e:
                    print(f"{e.title}: {e.user_message}")
                    continue
                print(summary.summary)
                continue

            session.set_options(options)
            try:
                result = await session.submit()
            except DecisionWiseError:
                print_error(session)
                continue

            if result is not None:
                print("The best option is...")
                print(f"  {result.best_option}")
                print(f"  {result.reasoning}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="decisionwise",
        description="Can't decide? Let AI make the objective choice for you.",
    )
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    parser.add_argument(
        "--summarize", action="store_true",
        help="Summarize the options instead of picking one",
    )
    args = parser.parse_args(argv)

    config = Configuration(args.config)
    logging_config = config.get_logging_config()
    configure_logging(logging_config["level"], logging_config["format"])

    try:
        return asyncio.run(run(config, args.summarize))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
