#!/usr/bin/env python3
"""
Route Query Script

Runs one message through the router with the configured Pinecone, Exa and
LLM clients and prints the routing decision plus the assembled context.
Useful for checking lexicon and dispatch changes against live indexes.

Usage:
    python scripts/route_query.py "How did Arjun Rao perform between minute 25-30?"
    python scripts/route_query.py --deployment club --classifier llm "What's the score?"
"""

import sys
import asyncio
import argparse
import logging

from dotenv import load_dotenv


def main():
    parser = argparse.ArgumentParser(description="Route a football question and print the retrieval context")
    parser.add_argument("message", help="User message to route")
    parser.add_argument("--deployment", choices=["match", "club"], help="Override router.deployment")
    parser.add_argument("--classifier", choices=["keyword", "llm"], help="Override router.classifier")
    parser.add_argument("--lexicon", type=str, help="Path to a lexicon JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from touchline.common.config import load_config
    from touchline.retriever.factory import create_router
    from touchline.retriever.router import result_counts

    config = load_config()
    if args.deployment:
        config.router.deployment = args.deployment
    if args.classifier:
        config.router.classifier = args.classifier
    if args.lexicon:
        config.router.lexicon_path = args.lexicon

    print(f"[Route] Deployment: {config.router.deployment}")
    print(f"[Route] Classifier: {config.router.classifier}")

    try:
        router = create_router(config)
    except (OSError, ValueError) as e:
        print(f"[Route] ERROR: Failed to build router: {e}")
        sys.exit(1)

    result = asyncio.run(router.retrieve(args.message))

    print(f"[Route] Intent: {result.intent.value}")
    print(f"[Route] Entities: {result.entities.to_dict()}")
    print(f"[Route] Results: {result_counts(result.sections)}")

    if not result.context:
        print("[Route] No context retrieved")
        return

    print()
    print(result.context)


if __name__ == "__main__":
    main()
