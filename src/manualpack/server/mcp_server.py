"""FastMCP server implementation for ManualPack."""

from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from manualpack.config import Settings
from manualpack.protocols import EmbeddingProvider
from manualpack.search import ManualSearcher
from manualpack.storage import ManualStore


def create_mcp_server(
    pack_path: Path,
    embedder: Optional[EmbeddingProvider] = None,
    settings: Optional[Settings] = None,
) -> FastMCP:
    """Create an MCP server for a specific manual pack.

    Args:
        pack_path: Path to the .manualpack file to serve
        embedder: Embedding provider matching the one used at ingest time.
            Defaults to the pack's recorded sentence-transformers model.
        settings: Search thresholds and model fallback; read from the
            environment when omitted

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="manualpack",
    )

    settings = settings or Settings()
    store = ManualStore.open(pack_path)
    if embedder is None:
        from manualpack.embedders import SentenceTransformerEmbedder

        embedder = SentenceTransformerEmbedder(
            store.get_metadata("embedding_model") or settings.embedding_model
        )
    searcher = ManualSearcher(
        store,
        embedder,
        thresholds=settings.search_thresholds,
        min_results=settings.search_min_results,
    )

    @mcp.tool()
    def manuals() -> str:
        """List the manuals in the pack.

        Returns:
            One line per manual with its id, title, page and chunk counts
        """
        rows = store.list_manuals()
        if not rows:
            return "No manuals in this pack"

        lines = []
        for m in rows:
            title = m["title"] or m["manual_id"]
            lines.append(
                f"{m['manual_id']:<40} {m['page_count']:>5} pages "
                f"{m['chunk_count']:>6} chunks  {title}"
            )
        return "\n".join(lines)

    @mcp.tool()
    def read_page(manual_id: str, page: int) -> str:
        """Read the stored chunks of one manual page.

        Args:
            manual_id: Manual identifier (as shown in manuals output)
            page: Page number

        Returns:
            The page's chunks in order, separated by blank lines
        """
        chunks = store.get_chunks(manual_id, page=page)
        if not chunks:
            return f"Error: No chunks for {manual_id} page {page}"
        return "\n\n".join(c["content"] for c in chunks)

    @mcp.tool()
    def search(query: str, manual_id: str = "", limit: int = 6) -> str:
        """Search the manuals for passages relevant to a troubleshooting question.

        For example: "coin mech rejects quarters" also finds chunks that talk
        about credits or tokens.

        Args:
            query: Natural language question
            manual_id: Optional manual to restrict the search to
            limit: Maximum number of results to return (default: 6)

        Returns:
            Ranked list of manual passages with page citations and scores
        """
        response = searcher.search(query, manual_id=manual_id or None, max_results=limit)

        if not response.results:
            return f"No results found for: {query}"

        lines = [f"Strategy: {response.strategy}", ""]
        for i, r in enumerate(response.results, 1):
            text = r.content[:200].replace("\n", " ")
            if len(r.content) > 200:
                text += "..."

            pages = f"p.{r.page_start}" if r.page_start == r.page_end else f"pp.{r.page_start}-{r.page_end}"
            lines.append(f"{i}. [{r.score:.3f}] {r.manual_title} ({pages})")
            lines.append(f"   {text}")
            lines.append("")

        return "\n".join(lines)

    return mcp
