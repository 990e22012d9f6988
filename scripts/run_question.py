# scripts/run_question.py

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from hybrid_rag.config import PipelineConfig
from hybrid_rag.model import get_default_embeddings, get_default_model
from hybrid_rag.pipeline.pipeline import AgenticPipeline, Clients
from hybrid_rag.retrieval.vectors import InMemoryVectorStore
from scripts.case_utils import resolve_documents, write_artifact


def main():
    parser = argparse.ArgumentParser(description="Index a corpus and answer a question with the agent pipeline.")
    parser.add_argument(
        "--docs",
        required=True,
        help="Path to a text/markdown file or a glob pattern",
    )
    parser.add_argument(
        "--question",
        required=True,
        help="Question to answer",
    )
    parser.add_argument(
        "--run-id",
        default="manual_question",
        help="Run id for artifacts",
    )
    parser.add_argument(
        "--no-critic",
        action="store_true",
        help="Skip the critic stage",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Clean document text before chunking",
    )
    parser.add_argument(
        "--summarize",
        action="store_true",
        help="Index a model-written summary of every chunk",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = PipelineConfig.from_env()
    if args.no_critic:
        config.agent.enable_critic = False
    if args.clean:
        config.retrieval.clean_documents = True
    if args.summarize:
        config.retrieval.summarize_chunks = True

    docs = resolve_documents(args.docs)
    print(f"Found {len(docs)} document(s) to index")

    pipeline = AgenticPipeline(
        Clients(default=get_default_model()),
        get_default_embeddings(),
        InMemoryVectorStore(),
        config=config,
    )
    pipeline.index_documents(*docs)
    print(f"Indexed {pipeline.count_documents()} chunks")

    resp = pipeline.run(args.question)

    print("  ✓ Completed")
    print(f"  ➡ Evidence: {len(resp.evidence)} items")
    if resp.critic is not None:
        print(f"  ➡ Critic verdict: {resp.critic.verdict}")
    print(f"  ➡ Final Answer:\n{resp.final_answer}")

    artifacts_dir = Path("artifacts/questions")
    out_path = write_artifact(artifacts_dir, args.run_id, "response", resp.to_dict())
    print(f"Artifacts written to: {out_path}")


if __name__ == "__main__":
    main()
