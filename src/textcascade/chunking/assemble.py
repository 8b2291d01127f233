"""
Wrap finished chunks into output documents.
"""

import copy
from typing import Any, Dict, List, Optional, Sequence

from ..core.models import Chunk, Document


def assemble_documents(
    chunks: Sequence[Chunk], metadata: Optional[Dict[str, Any]] = None
) -> List[Document]:
    """
    One document per chunk, in order.

    ``metadata`` is merged after ``loc`` and copied per document so documents
    never share mutable caller data.
    """
    documents = []
    for chunk in chunks:
        merged: Dict[str, Any] = {"loc": chunk.loc}
        if metadata:
            merged.update(copy.deepcopy(metadata))
        documents.append(Document(content=chunk.content, metadata=merged))
    return documents
