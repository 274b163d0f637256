"""
Document loading and chunking.

Converts a stored upload into LangChain Documents and splits them into
retrievable chunks.

Dependencies: langchain_community.document_loaders, langchain_text_splitters
System role: First two stages of document ingestion
"""

from pathlib import Path

from langchain_community.document_loaders import BSHTMLLoader, PyPDFLoader, TextLoader
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from askdoc.core.exceptions import UpstreamError


class ParsingError(UpstreamError):
    """Raised when a document cannot be loaded or holds no text."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message, resource_id=file_path)


def load_documents(file_path: str, file_type: str) -> list[Document]:
    """
    Load a stored upload into LangChain Documents.

    Args:
        file_path: Path of the saved original
        file_type: pdf, md, txt, html or adoc

    Returns:
        list[Document]: Parsed documents (one per PDF page, else one)

    Raises:
        ParsingError: When the file is missing, unsupported or empty
    """
    path = Path(file_path)
    if not path.exists():
        raise ParsingError(f"File not found: {file_path}", file_path)

    if file_type == "pdf":
        loader = PyPDFLoader(file_path)
    elif file_type == "html":
        loader = BSHTMLLoader(file_path, open_encoding="utf-8", bs_kwargs={"features": "html.parser"})
    elif file_type in ("txt", "md", "adoc"):
        loader = TextLoader(file_path, encoding="utf-8", autodetect_encoding=True)
    else:
        raise ParsingError(f"Unsupported file type: {file_type}", file_path)

    try:
        documents = loader.load()
    except Exception as e:
        raise ParsingError(f"Failed to parse {path.name}: {e}", file_path) from e

    documents = [doc for doc in documents if doc.page_content.strip()]
    if not documents:
        raise ParsingError("document contains no extractable text", file_path)
    return documents


class Chunker:
    """Split documents into chunks using RecursiveCharacterTextSplitter."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        """
        Initialize chunker with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks
        """
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=min(chunk_overlap, max(chunk_size - 1, 0)),
            add_start_index=True,
            length_function=len,
        )

    def chunk(self, documents: list[Document]) -> list[Document]:
        """
        Split documents into chunks.

        Args:
            documents: LangChain Documents to split

        Returns:
            list[Document]: Chunked documents with preserved metadata

        Raises:
            ValueError: When documents list is empty
        """
        if not documents:
            raise ValueError("No documents to chunk")
        return self._splitter.split_documents(documents)
