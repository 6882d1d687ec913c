"""CLI entry point for ManualPack."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

from manualpack.chunkers import OverlapChunker, PageSegmenter
from manualpack.config import ChunkingConfig, Settings
from manualpack.errors import ManualPackError
from manualpack.ingesters import get_ingester
from manualpack.pipeline import IngestionPipeline
from manualpack.storage import ManualStore
from manualpack.utils.headings import load_section_headings

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def build_chunking_config(
    settings: Settings,
    target_size: Optional[int] = None,
    overlap: Optional[int] = None,
    min_size: Optional[int] = None,
) -> ChunkingConfig:
    """Merge command-line overrides over the environment settings."""
    return ChunkingConfig(
        target_size=target_size if target_size is not None else settings.chunk_target_size,
        overlap=overlap if overlap is not None else settings.chunk_overlap,
        min_size=min_size if min_size is not None else settings.chunk_min_size,
    )


def ingest(
    source: str,
    output: str,
    config: ChunkingConfig,
    headings: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Chunk and embed manuals into a .manualpack file.

    Args:
        source: Path to a manual file, a folder of manuals or a zip file
        output: Path for output .manualpack file
        config: Chunk sizes
        headings: Optional JSON file of page -> section heading
            (single-file sources only; overrides a sidecar file)
        settings: Environment settings
    """
    settings = settings or Settings()
    source_path = Path(source)
    output_path = Path(output)

    ingester = get_ingester(source_path)
    if ingester is None:
        logger.error(f"Cannot process: {source}")
        logger.error("Supported inputs: .md/.markdown/.txt files, folders, .zip files")
        sys.exit(1)

    section_headings = load_section_headings(headings) if headings else None

    from manualpack.embedders import SentenceTransformerEmbedder

    embedder = SentenceTransformerEmbedder(settings.embedding_model, settings.embed_batch_size)
    store = ManualStore(output_path)
    store.initialize()
    pipeline = IngestionPipeline(
        embedder=embedder,
        sink=store,
        segmenter=PageSegmenter(OverlapChunker(config)),
        embed_batch_size=settings.embed_batch_size,
    )

    store.set_metadata("source", str(source_path.absolute()))
    store.set_metadata("source_type", ingester.source_type)
    store.set_metadata("created_at", datetime.now().isoformat())
    store.set_metadata("embedding_model", embedder.model_name)
    store.set_metadata("chunking", json.dumps(asdict(config)))

    logger.info(f"Ingesting {source} -> {output}")

    manual_count = 0
    chunk_count = 0

    for manual in ingester.ingest(source_path):
        if section_headings is not None and ingester.source_type == "file":
            manual.section_headings = section_headings

        result = pipeline.ingest(manual)
        store.store_manual(manual, page_count=result.pages)
        manual_count += 1
        chunk_count += result.chunks

    logger.info("")
    logger.info(f"Ingested {manual_count} manuals, {chunk_count} chunks -> {output_path}")


def chunk(source: str, manual_id: Optional[str], config: ChunkingConfig) -> None:
    """Print the chunks of one manual file as JSON, without storing anything."""
    path = Path(source)
    markdown = path.read_text(encoding="utf-8", errors="replace")
    segmenter = PageSegmenter(OverlapChunker(config))
    chunks = segmenter.chunk_markdown(markdown, manual_id or path.stem)
    print(json.dumps([asdict(c) for c in chunks], indent=2, ensure_ascii=False))


def search(
    pack: str,
    query: str,
    manual_id: Optional[str] = None,
    limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Search a pack and print ranked passages."""
    settings = settings or Settings()
    store = ManualStore.open(pack)

    from manualpack.embedders import SentenceTransformerEmbedder
    from manualpack.search import ManualSearcher

    embedder = SentenceTransformerEmbedder(
        store.get_metadata("embedding_model") or settings.embedding_model
    )
    searcher = ManualSearcher(
        store,
        embedder,
        thresholds=settings.search_thresholds,
        min_results=settings.search_min_results,
    )
    response = searcher.search(
        query, manual_id=manual_id, max_results=limit or settings.search_max_results
    )

    if not response.results:
        print(f"No results found for: {query}")
        return

    print(f"Strategy: {response.strategy} ({response.total} results)")
    print("")
    for i, r in enumerate(response.results, 1):
        print(f"{i}. [{r.score:.3f}] {r.manual_title} p.{r.page_start}")
        print(f"   {r.content[:200].replace(chr(10), ' ')}")
        print("")


def export(pack: str, manual_id: str, output: Optional[str] = None) -> None:
    """Export one manual's chunks as JSON."""
    store = ManualStore.open(pack)
    data = json.dumps(store.export_manual(manual_id), indent=2, ensure_ascii=False)

    if output:
        Path(output).write_text(data, encoding="utf-8")
        logger.info(f"Exported {manual_id} -> {output}")
    else:
        print(data)


def serve(pack: str, transport: str = "stdio") -> None:
    """Start MCP server for a manual pack.

    Args:
        pack: Path to .manualpack file
        transport: Transport protocol (stdio or sse)
    """
    pack_path = Path(pack)
    if not pack_path.exists():
        logger.error(f"Manual pack not found: {pack}")
        sys.exit(1)

    # Import here to avoid loading MCP unless needed
    from manualpack.server import create_mcp_server

    from typing import cast, Literal

    logger.info(f"Serving {pack} via {transport}")
    mcp = create_mcp_server(pack_path)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def info(pack: str) -> None:
    """Show information about a manual pack.

    Args:
        pack: Path to .manualpack file
    """
    store = ManualStore.open(pack)
    pack_path = store.path

    metadata = {}
    for key in ["source", "source_type", "created_at", "embedding_model", "chunking"]:
        value = store.get_metadata(key)
        if value:
            metadata[key] = value

    manuals = store.list_manuals()

    print(f"ManualPack: {pack_path.name}")
    print(f"  Size: {pack_path.stat().st_size / 1024:.1f} KB")
    print(f"")
    print(f"Metadata:")
    for key, value in metadata.items():
        print(f"  {key}: {value}")
    print(f"")
    print(f"Manuals: {len(manuals)}")
    for m in manuals:
        print(f"  {m['manual_id']}: {m['page_count']} pages, {m['chunk_count']} chunks")


def _add_chunking_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--target-size", type=int, help="Target chunk size in characters")
    parser.add_argument("--overlap", type=int, help="Overlap between chunks in characters")
    parser.add_argument("--min-size", type=int, help="Minimum chunk size in characters")


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="manualpack",
        description="ManualPack - page-aware chunking and search for equipment manuals",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ingest command
    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Chunk and embed manuals into a .manualpack file",
    )
    ingest_parser.add_argument("source", help="Manual file, folder or zip file path")
    ingest_parser.add_argument(
        "-o",
        "--output",
        default="manuals.manualpack",
        help="Output .manualpack path (default: manuals.manualpack)",
    )
    ingest_parser.add_argument(
        "--headings",
        help="JSON file mapping page numbers to section headings",
    )
    _add_chunking_args(ingest_parser)

    # chunk command
    chunk_parser = subparsers.add_parser(
        "chunk",
        help="Print a manual's chunks as JSON",
    )
    chunk_parser.add_argument("source", help="Manual markdown file")
    chunk_parser.add_argument("--manual-id", help="Manual id (default: file stem)")
    _add_chunking_args(chunk_parser)

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search a manual pack",
    )
    search_parser.add_argument("pack", help="Path to .manualpack file")
    search_parser.add_argument("query", help="Question to search for")
    search_parser.add_argument("--manual", help="Restrict to one manual id")
    search_parser.add_argument("--limit", type=int, help="Maximum results")

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export a manual's chunks as JSON",
    )
    export_parser.add_argument("pack", help="Path to .manualpack file")
    export_parser.add_argument("manual_id", help="Manual id to export")
    export_parser.add_argument("-o", "--output", help="Output JSON path (default: stdout)")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start MCP server for a manual pack",
    )
    serve_parser.add_argument("pack", help="Path to .manualpack file")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a manual pack",
    )
    info_parser.add_argument("pack", help="Path to .manualpack file")

    args = parser.parse_args(argv)

    try:
        if args.command in ("ingest", "chunk"):
            settings = Settings()
            config = build_chunking_config(
                settings, args.target_size, args.overlap, args.min_size
            )
            if args.command == "ingest":
                ingest(args.source, args.output, config, args.headings, settings)
            else:
                chunk(args.source, args.manual_id, config)
        elif args.command == "search":
            search(args.pack, args.query, args.manual, args.limit)
        elif args.command == "export":
            export(args.pack, args.manual_id, args.output)
        elif args.command == "serve":
            serve(args.pack, args.transport)
        elif args.command == "info":
            info(args.pack)
    except (ManualPackError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
