"""Tests for the FastAPI rendering target."""

import pytest

from microapi.core.ir import (
    Annotation,
    ContainerType,
    ControllerDeclaration,
    GeneratedMethod,
    GeneratedParameter,
    HttpVerb,
    NamedType,
    NullableType,
    ParameterSource,
    PrimitiveType,
    StringValue,
)
from microapi.synth.config import SynthesisConfig
from microapi.synth.runner import SynthesisRunner
from microapi.synth.targets.fastapi import (
    FastAPITarget,
    ImportSet,
    PythonTypeRenderer,
    fastapi_route,
    module_path,
    snake_case,
)

STRING = PrimitiveType(name="string")


@pytest.fixture
def target() -> FastAPITarget:
    return FastAPITarget()


@pytest.fixture
def result(sample_graph):
    return SynthesisRunner(SynthesisConfig(target="fastapi")).run(sample_graph)


# =============================================================================
# Helpers
# =============================================================================


@pytest.mark.parametrize(
    "name,expected",
    [("UserServiceController", "user_service_controller"), ("User", "user"), ("id", "id")],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected


def test_module_path():
    assert module_path("Shop.Models.UserInfo") == "Shop.Models.user_info"
    assert module_path("UserInfo") == "user_info"


@pytest.mark.parametrize(
    "template,expected",
    [
        ("{id}", "/{id}"),
        ("{id:int}", "/{id}"),
        ("/users/{id:int}/", "/users/{id}"),
        ("files/{rest:path}", "/files/{rest:path}"),
        ("", ""),
    ],
)
def test_fastapi_route(template, expected):
    assert fastapi_route(template) == expected


class TestTypeRenderer:
    def render(self, descriptor):
        imports = ImportSet()
        return PythonTypeRenderer(imports).render(descriptor), imports.render()

    def test_primitives(self):
        assert self.render(STRING) == ("str", [])
        assert self.render(PrimitiveType(name="long")) == ("int", [])
        assert self.render(PrimitiveType(name="double")) == ("float", [])

    def test_nullable(self):
        text, imports = self.render(NullableType(inner=PrimitiveType(name="int")))

        assert text == "Optional[int]"
        assert imports == ["from typing import Optional"]

    def test_containers(self):
        descriptor = ContainerType(
            name="System.Collections.Generic.Dictionary",
            args=(
                STRING,
                ContainerType(
                    name="System.Collections.Generic.List",
                    args=(NullableType(inner=NamedType(name="Shop.Models.User")),),
                ),
            ),
        )

        text, imports = self.render(descriptor)

        assert text == "dict[str, list[Optional[User]]]"
        assert imports == ["from typing import Optional", "", "from Shop.Models import User"]

    def test_well_known_types(self):
        text, imports = self.render(NamedType(name="System.Guid"))

        assert text == "UUID"
        assert imports == ["from uuid import UUID"]

    def test_awaitables_unwrapped(self):
        task = ContainerType(name="System.Threading.Tasks.Task", args=(STRING,))

        assert self.render(task)[0] == "str"
        assert self.render(NamedType(name="System.Threading.Tasks.Task"))[0] == "None"


# =============================================================================
# Generated modules
# =============================================================================


def test_file_names(result):
    assert [u.file_name for u in result.units] == [
        "Shop/Facades/Controllers/user_service_controller.py",
        "Shop/Facades/Controllers/user_service_requests.py",
        "Shop/Models/user_info.py",
    ]


def test_generated_modules_compile(result):
    for unit in result.units:
        compile(unit.source_text, unit.file_name, "exec")


def test_router(result):
    source = result.as_mapping()["Shop.Facades.Controllers.UserServiceController"]

    assert 'router = APIRouter(prefix="/UserService", tags=["UserService"])' in source
    assert "from fastapi import APIRouter, Body, Depends, Path" in source
    assert "from Shop.Facades.Controllers.user_service_requests import CreateUserRequest" in source
    assert (
        '@router.get("/{id}")\n'
        "def GetUser(\n"
        "    *,\n"
        "    id: Annotated[int, Path()],\n"
        "    service: Annotated[IUserService, Depends()],\n"
        ") -> User:\n"
        "    return service.GetUser(id)\n"
    ) in source
    assert (
        '@router.post("/CreateUserAsync")\n'
        '@Authorize(Roles="admin")\n'
        "async def CreateUserAsync(\n"
        "    *,\n"
        "    request: Annotated[CreateUserRequest, Body()],\n"
        "    service: Annotated[IUserService, Depends()],\n"
        ") -> User:\n"
        "    return await service.CreateUserAsync(request.name, request.age)\n"
    ) in source


def test_envelope_models(result):
    source = result.as_mapping()["Shop.Facades.Controllers.UserServiceRequests"]

    assert "from pydantic import BaseModel" in source
    assert "class CreateUserRequest(BaseModel):\n    name: str\n    age: Optional[int] = None\n" in source


def test_dto_model(result):
    source = result.as_mapping()["Shop.Models.UserInfo"]

    assert "class UserInfoGenerated(BaseModel):" in source
    assert '    Name: Annotated[str, Required()] = ""\n' in source
    assert "    Age: int\n" in source
    assert "from System.ComponentModel.DataAnnotations import Required" in source


def test_nullable_query_parameter_defaults_to_none(target):
    controller = ControllerDeclaration(
        source_identity="Shop.SearchFacade",
        controller_name="Search",
        type_name="SearchController",
        namespace="Shop.Controllers",
        dto_namespace="Shop.Controllers",
        service_type=NamedType(name="Shop.ISearch"),
        methods=(
            GeneratedMethod(
                name="Find",
                source_member_name="Find",
                http_verb=HttpVerb.GET,
                route_template="{kind}",
                return_type=ContainerType(name="System.Collections.Generic.List", args=(STRING,)),
                parameters=(
                    GeneratedParameter(name="kind", type=STRING, source=ParameterSource.ROUTE),
                    GeneratedParameter(
                        name="q", type=NullableType(inner=STRING), source=ParameterSource.QUERY
                    ),
                ),
                annotations=(Annotation(kind="Cached", positional=(StringValue(value="1m"),)),),
            ),
        ),
    )

    source = target.render_controller(controller)

    assert "    kind: Annotated[str, Path()],\n" in source
    assert "    q: Annotated[Optional[str], Query()] = None,\n" in source
    assert '@Cached("1m")\n' in source
    assert ") -> list[str]:\n" in source
    compile(source, "search_controller.py", "exec")


class TestGenericAnnotation:
    @pytest.mark.parametrize("kind", ["Shop.ValidateAttribute`1", "Shop.Validate<Shop.Rule>"])
    def test_subscripted_with_type_arguments(self, target, kind):
        imports = ImportSet()
        annotation = Annotation(kind=kind, type_arguments=(NamedType(name="Shop.Rule"),))

        assert target.render_annotation(annotation, imports) == "Validate[Rule]()"
        assert imports.render() == ["from Shop import Rule, Validate"]


# =============================================================================
# Generated parameter names
# =============================================================================


class TestGeneratedNames:
    def test_route_parameter_named_service(self, target, single_operation_controller):
        controller = single_operation_controller("Find", HttpVerb.GET, "{service}", ["service"])

        source = target.render_controller(controller)

        compile(source, "finder_controller.py", "exec")
        assert "    service: Annotated[str, Path()],\n" in source
        assert "    service2: Annotated[IFinder, Depends()],\n" in source
        assert "    return service2.Find(service)\n" in source

    def test_route_parameter_named_request(self, target, single_operation_controller):
        controller = single_operation_controller(
            "Save", HttpVerb.POST, "{request}", ["request", "body"]
        )

        source = target.render_controller(controller)

        compile(source, "finder_controller.py", "exec")
        assert "    request: Annotated[str, Path()],\n" in source
        assert "    request2: Annotated[SaveRequest, Body()],\n" in source
        assert "    return service.Save(request, request2.body)\n" in source
