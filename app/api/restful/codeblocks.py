from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from typing import Dict, List
import logging
import uuid

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/codeblocks",
    tags=["codeblocks"],
)

STARTER_BLOCKS = [
    {
        "title": "Async case",
        "code": "async function example() {\n  // Your code here\n}",
    },
    {
        "title": "Array methods",
        "code": "const numbers = [1, 2, 3, 4, 5];\n// Your code here",
    },
    {
        "title": "Promise chain",
        "code": "// Create a promise chain here",
    },
    {
        "title": "Event handling",
        "code": "// Add event listener here",
    },
]


class CodeBlockIn(BaseModel):
    """Payload for creating a code block."""
    title: str = Field(min_length=1)
    code: str = Field(min_length=1)


class CodeBlock(CodeBlockIn):
    """A stored exercise. Its id doubles as the room id for the exercise."""
    id: str


class CodeBlockCatalog:
    """In-memory exercise catalog, kept in insertion order."""

    def __init__(self, seed: bool = False):
        self._blocks: Dict[str, CodeBlock] = {}
        if seed:
            for block in STARTER_BLOCKS:
                self.create(CodeBlockIn(**block))

    def all(self) -> List[CodeBlock]:
        return list(self._blocks.values())

    def get(self, block_id: str):
        return self._blocks.get(block_id)

    def create(self, payload: CodeBlockIn) -> CodeBlock:
        block = CodeBlock(id=uuid.uuid4().hex, title=payload.title, code=payload.code)
        self._blocks[block.id] = block
        return block


@router.get("", response_model=List[CodeBlock])
async def list_codeblocks(request: Request):
    """List every exercise in the catalog."""
    return request.app.state.catalog.all()


@router.post("", response_model=CodeBlock, status_code=201)
async def create_codeblock(payload: CodeBlockIn, request: Request):
    """
    Add a new exercise.

    Args:
        payload: Title and starter code, both required
    """
    block = request.app.state.catalog.create(payload)
    logger.info(f"New CodeBlock added: {block.id} ({block.title})")
    return block


@router.get("/{block_id}", response_model=CodeBlock)
async def get_codeblock(block_id: str, request: Request):
    block = request.app.state.catalog.get(block_id)
    if block is None:
        raise HTTPException(status_code=404, detail=f"No code block found with id: {block_id}")
    return block
