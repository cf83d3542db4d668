"""Shared test fixtures for GQLAtlas test suite."""

import sys
import shutil
import pytest
from pathlib import Path

# Ensure gqlatlas is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from gqlatlas.models import (
    SchemaNode, SchemaField, NodeKind, ResolverInfo, SourceKind,
    DatabaseDetail, ApiDetail,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def schema_sdl():
    """SDL of the blog subgraph fixture."""
    return (FIXTURES_DIR / "schema.graphql").read_text()


@pytest.fixture
def schema_file(tmp_path):
    """Write the schema fixture to tmp and return its path."""
    target = tmp_path / "schema.graphql"
    shutil.copy(FIXTURES_DIR / "schema.graphql", target)
    return target


@pytest.fixture
def resolvers_dir(tmp_path):
    """A resolver source tree with vendored and non-source files mixed in."""
    src = tmp_path / "src" / "resolvers"
    src.mkdir(parents=True)
    shutil.copy(FIXTURES_DIR / "resolvers.ts", src / "resolvers.ts")
    shutil.copy(FIXTURES_DIR / "resolvers.js", src / "resolvers.js")
    (src / "README.md").write_text("# resolvers\n")
    (src / "types.d.ts").write_text("export declare const resolvers: any;\n")

    vendored = src / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "index.js").write_text("const libResolver = () => fetch('https://x');\n")
    return src


@pytest.fixture
def enrichment_response():
    """A provider answer with prose around a fenced JSON payload."""
    return (FIXTURES_DIR / "enrichment_response.txt").read_text()


@pytest.fixture
def db_resolver():
    """A prisma-backed resolver."""
    return ResolverInfo(
        path="Query.users",
        source_kind=SourceKind.DATABASE,
        database_detail=DatabaseDetail(engine="prisma", model="user", operation="findMany"),
        file_path="src/resolvers.ts",
        line_number=12,
    )


@pytest.fixture
def api_resolver():
    """A REST-backed resolver with a literal endpoint."""
    return ResolverInfo(
        path="Query.posts",
        source_kind=SourceKind.API,
        api_detail=ApiDetail(protocol="rest", endpoint="https://api.example.com/posts", method="GET"),
    )


@pytest.fixture
def unknown_resolver():
    """A resolver no rule could classify."""
    return ResolverInfo(
        path="Query.search",
        file_path="src/resolvers.ts",
        line_number=21,
        code="(_p, args, context) => context.searchIndex(args.term)",
    )


@pytest.fixture
def computed_resolver():
    """A computed resolver that depends on another resolver."""
    return ResolverInfo(
        path="Post.author",
        source_kind=SourceKind.COMPUTED,
        dependencies=["ctx.userById"],
    )


@pytest.fixture
def sample_resolvers(db_resolver, api_resolver, unknown_resolver, computed_resolver):
    """One resolver of every source kind."""
    return [db_resolver, api_resolver, unknown_resolver, computed_resolver]


@pytest.fixture
def sample_schema_nodes():
    """Hand-built schema nodes for Query, Post and User."""
    return [
        SchemaNode(
            kind=NodeKind.QUERY,
            name="Query",
            fields=[
                SchemaField(name="users", declared_type="User", is_non_null=True, is_list=True),
                SchemaField(name="posts", declared_type="Post", is_non_null=True, is_list=True),
            ],
        ),
        SchemaNode(
            kind=NodeKind.OBJECT_TYPE,
            name="Post",
            fields=[
                SchemaField(name="id", declared_type="ID", is_non_null=True),
                SchemaField(name="title", declared_type="String"),
                SchemaField(name="author", declared_type="User"),
            ],
        ),
        SchemaNode(
            kind=NodeKind.OBJECT_TYPE,
            name="User",
            fields=[SchemaField(name="id", declared_type="ID", is_non_null=True)],
        ),
        SchemaNode(kind=NodeKind.ENUM, name="Role"),
    ]
