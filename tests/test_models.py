"""Tests for gqlatlas.models"""

import pytest
from gqlatlas.models import (
    SchemaField, SchemaNode, NodeKind, ResolverInfo, SourceKind,
    DatabaseDetail, ApiDetail, Connection, ConnectionKind, AnalysisResult,
)


class TestNodeKind:
    def test_values(self):
        assert NodeKind.QUERY.value == "Query"
        assert NodeKind.OBJECT_TYPE.value == "ObjectType"
        assert NodeKind.INPUT_TYPE.value == "InputType"

    def test_has_fields(self):
        assert NodeKind.QUERY.has_fields
        assert NodeKind.INTERFACE.has_fields
        assert not NodeKind.ENUM.has_fields
        assert not NodeKind.UNION.has_fields
        assert not NodeKind.INPUT_TYPE.has_fields


class TestSchemaField:
    @pytest.mark.parametrize("declared", ["[User]", "User!", "[User!]!"])
    def test_rejects_wrapped_type(self, declared):
        with pytest.raises(ValueError):
            SchemaField(name="users", declared_type=declared)

    def test_to_dict(self):
        d = SchemaField(name="posts", declared_type="Post", is_non_null=True, is_list=True).to_dict()
        assert d == {
            "name": "posts",
            "type": "Post",
            "isNonNull": True,
            "isList": True,
            "description": None,
        }

    def test_builtin_scalar(self):
        assert SchemaField(name="id", declared_type="ID").is_builtin_scalar
        assert not SchemaField(name="at", declared_type="DateTime").is_builtin_scalar


class TestSchemaNode:
    def test_fields_omitted_when_absent(self):
        d = SchemaNode(kind=NodeKind.ENUM, name="Role").to_dict()
        assert d["type"] == "Enum"
        assert "fields" not in d

    def test_fields_serialized(self):
        node = SchemaNode(
            kind=NodeKind.OBJECT_TYPE,
            name="Post",
            fields=[SchemaField(name="id", declared_type="ID", is_non_null=True)],
        )
        assert node.to_dict()["fields"][0]["type"] == "ID"


class TestResolverInfo:
    def test_defaults_to_unknown(self):
        resolver = ResolverInfo(path="Query.search")
        assert resolver.source_kind == SourceKind.UNKNOWN
        assert resolver.database_detail is None
        assert resolver.api_detail is None
        assert not resolver.is_known

    def test_details_are_exclusive(self):
        with pytest.raises(ValueError):
            ResolverInfo(
                path="Query.users",
                source_kind=SourceKind.DATABASE,
                database_detail=DatabaseDetail("prisma"),
                api_detail=ApiDetail("rest"),
            )

    def test_database_requires_detail(self):
        with pytest.raises(ValueError):
            ResolverInfo(path="Query.users", source_kind=SourceKind.DATABASE)

    def test_unknown_rejects_detail(self):
        with pytest.raises(ValueError):
            ResolverInfo(path="Query.users", api_detail=ApiDetail("rest"))

    def test_computed_has_no_detail(self):
        resolver = ResolverInfo(path="User.fullName", source_kind=SourceKind.COMPUTED)
        assert resolver.is_known

    def test_path_parts(self, db_resolver):
        assert db_resolver.type_name == "Query"
        assert db_resolver.field_name == "users"

    def test_standalone_path(self):
        resolver = ResolverInfo(path="userResolver")
        assert resolver.type_name == "userResolver"
        assert resolver.field_name is None

    def test_to_dict(self, db_resolver):
        d = db_resolver.to_dict()
        assert d["sourceType"] == "database"
        assert d["databaseInfo"] == {"type": "prisma", "model": "user", "operation": "findMany"}
        assert "apiInfo" not in d
        assert d["file"] == "src/resolvers.ts"
        assert d["line"] == 12

    def test_to_dict_without_location(self, api_resolver):
        d = api_resolver.to_dict()
        assert d["apiInfo"]["endpoint"] == "https://api.example.com/posts"
        assert "file" not in d


class TestDetails:
    def test_database_from_dict_accepts_engine_key(self):
        detail = DatabaseDetail.from_dict({"engine": "mongoose", "model": "User"})
        assert detail.engine == "mongoose"
        assert detail.model == "User"
        assert detail.operation is None

    def test_database_from_dict_defaults(self):
        assert DatabaseDetail.from_dict({}).engine == "other"

    def test_database_from_dict_keeps_only_strings(self):
        detail = DatabaseDetail.from_dict({"type": 3, "engine": "typeorm", "model": {"x": 1}, "operation": 7})
        assert detail == DatabaseDetail(engine="typeorm", model=None, operation=None)

    def test_api_from_dict_keeps_only_strings(self):
        detail = ApiDetail.from_dict({"type": "rest", "endpoint": ["https://a"], "method": None})
        assert detail == ApiDetail(protocol="rest", endpoint=None, method=None)

    def test_api_from_dict(self):
        detail = ApiDetail.from_dict({"type": "grpc", "endpoint": "users.v1.Users/Get"})
        assert detail.protocol == "grpc"
        assert detail.endpoint == "users.v1.Users/Get"


class TestConnection:
    def test_to_dict(self):
        connection = Connection("Post", "User", ConnectionKind.REFERENCES, "Post references User")
        assert connection.to_dict() == {
            "from": "Post",
            "to": "User",
            "type": "references",
            "description": "Post references User",
        }

    def test_from_dict(self):
        connection = Connection.from_dict({"from": "Query.users", "to": "DB:user", "type": "calls"})
        assert connection.kind == ConnectionKind.CALLS
        assert connection.description == ""

    @pytest.mark.parametrize("data", [
        {"to": "User", "type": "references"},
        {"from": "Post", "to": "", "type": "references"},
        {"from": "User", "to": "Node", "type": "implements"},
        {"from": "User", "to": "Node"},
    ])
    def test_from_dict_rejects_malformed(self, data):
        with pytest.raises(ValueError):
            Connection.from_dict(data)


class TestAnalysisResult:
    def test_unknown_resolvers(self, sample_resolvers):
        result = AnalysisResult(resolvers=sample_resolvers)
        assert [r.path for r in result.unknown_resolvers] == ["Query.search"]

    def test_summary(self, sample_schema_nodes, sample_resolvers):
        result = AnalysisResult(
            schema=sample_schema_nodes,
            resolvers=sample_resolvers,
            connections=[Connection("Post", "User", ConnectionKind.REFERENCES)],
        )
        summary = result.summary
        assert summary["nodes"]["ObjectType"] == 2
        assert summary["nodes"]["Enum"] == 1
        assert summary["resolvers"] == {"database": 1, "api": 1, "computed": 1, "unknown": 1}
        assert summary["connections"]["references"] == 1

    def test_lookup(self, sample_resolvers):
        result = AnalysisResult(resolvers=sample_resolvers)
        assert result.get_resolver("Post.author").source_kind == SourceKind.COMPUTED
        assert result.get_resolver("Nope.nothing") is None

    def test_to_dict_keys(self):
        d = AnalysisResult().to_dict()
        assert set(d) >= {"schema", "resolvers", "connections", "mode", "errors", "summary"}
        assert d["mode"] == "static"
