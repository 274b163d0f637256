"""
Answer prompt.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded answers
"""

from langchain_core.documents import Document
from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are a helpful documentation assistant embedded on a website.

## Instructions
1. Use ONLY the provided context to answer the question
2. If the context doesn't contain enough information, say so clearly
3. Mention the source filename when you rely on a passage
4. Be concise; answer in the language of the question"""

RAG_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Context:
{context}

Question: {question}"""),
])

NO_CONTEXT = "No relevant documents found."


def format_context(chunks: list[Document]) -> str:
    """Render retrieved chunks as numbered passages for the prompt."""
    if not chunks:
        return NO_CONTEXT
    passages = []
    for i, chunk in enumerate(chunks, start=1):
        filename = chunk.metadata.get("filename") or "unknown"
        passages.append(f"---\n[{i}] {filename}\n\n{chunk.page_content}\n---")
    return "\n".join(passages)
