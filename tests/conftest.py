"""Shared pytest fixtures for MicroAPI tests."""

import json
from pathlib import Path

import pytest

from microapi.core import ir
from microapi.core.graph import DeclarationGraph
from microapi.synth.controller import ControllerSynthesizer, plan_request_envelope
from microapi.synth.routes import bind_route

STRING = ir.PrimitiveType(name="string")
INT = ir.PrimitiveType(name="int")


def _string(value: str) -> ir.StringValue:
    return ir.StringValue(value=value)


def _type_ref(name: str) -> ir.TypeRefValue:
    return ir.TypeRefValue(type=ir.NamedType(name=name))


@pytest.fixture
def address_entity() -> ir.Declaration:
    """Plain entity used as a nested property type."""
    return ir.Declaration(
        identity="Shop.Models.Address",
        members=(
            ir.Member(name="Street", kind=ir.MemberKind.PROPERTY, type=STRING),
            ir.Member(name="City", kind=ir.MemberKind.PROPERTY, type=STRING),
        ),
    )


@pytest.fixture
def user_entity() -> ir.Declaration:
    """Entity with Id, Name, Age, Address plus an ignorable Password."""
    return ir.Declaration(
        identity="Shop.Models.User",
        members=(
            ir.Member(name="Id", kind=ir.MemberKind.PROPERTY, type=INT),
            ir.Member(
                name="Name",
                kind=ir.MemberKind.PROPERTY,
                type=STRING,
                annotations=(
                    ir.Annotation(kind="System.ComponentModel.DataAnnotations.RequiredAttribute"),
                ),
                initializer='""',
            ),
            ir.Member(name="Age", kind=ir.MemberKind.PROPERTY, type=INT),
            ir.Member(
                name="Address",
                kind=ir.MemberKind.PROPERTY,
                type=ir.NullableType(inner=ir.NamedType(name="Shop.Models.Address")),
            ),
            ir.Member(
                name="Password",
                kind=ir.MemberKind.PROPERTY,
                type=STRING,
                annotations=(ir.Annotation(kind="Shop.Models.SensitiveAttribute"),),
            ),
        ),
    )


@pytest.fixture
def user_info_dto() -> ir.Declaration:
    """Partial dto over User: Id ignored, Address written by hand, sensitive data ignored."""
    return ir.Declaration(
        identity="Shop.Models.UserInfo",
        is_partial=True,
        members=(ir.Member(name="Address", kind=ir.MemberKind.PROPERTY, type=STRING),),
        annotations=(
            ir.Annotation(
                kind="MicroAPI.DtoAttribute",
                positional=(_type_ref("Shop.Models.User"),),
                named={
                    "IgnoredProperties": ir.ArrayValue(items=(_string("Id"),)),
                    "IgnoredAttributes": ir.ArrayValue(
                        items=(_type_ref("Shop.Models.SensitiveAttribute"),)
                    ),
                },
            ),
        ),
    )


@pytest.fixture
def sensitive_attribute() -> ir.Declaration:
    return ir.Declaration(
        identity="Shop.Models.SensitiveAttribute",
        base_type=ir.NamedType(name="System.Attribute"),
    )


@pytest.fixture
def user_service() -> ir.Declaration:
    return ir.Declaration(
        identity="Shop.Services.IUserService",
        kind=ir.DeclarationKind.INTERFACE,
    )


@pytest.fixture
def user_facade() -> ir.Declaration:
    """Facade class with a GET by id and a POST with free parameters."""
    user = ir.NamedType(name="Shop.Models.User")
    return ir.Declaration(
        identity="Shop.Facades.UserServiceFacade",
        interfaces=(ir.NamedType(name="Shop.Services.IUserService"),),
        annotations=(ir.Annotation(kind="MicroAPI.HttpFacadeAttribute"),),
        members=(
            ir.Member(
                name="GetUser",
                type=user,
                parameters=(ir.Parameter(name="id", type=INT),),
                annotations=(ir.Annotation(kind="MicroAPI.GetAttribute", positional=(_string("{id}"),)),),
            ),
            ir.Member(
                name="CreateUserAsync",
                type=ir.ContainerType(name="System.Threading.Tasks.Task", args=(user,)),
                parameters=(
                    ir.Parameter(name="name", type=STRING),
                    ir.Parameter(name="age", type=ir.NullableType(inner=INT)),
                ),
                annotations=(
                    ir.Annotation(kind="MicroAPI.PostAttribute"),
                    ir.Annotation(
                        kind="Microsoft.AspNetCore.Authorization.AuthorizeAttribute",
                        named={"Roles": _string("admin")},
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def sample_declarations(
    address_entity: ir.Declaration,
    user_entity: ir.Declaration,
    user_info_dto: ir.Declaration,
    sensitive_attribute: ir.Declaration,
    user_service: ir.Declaration,
    user_facade: ir.Declaration,
) -> list[ir.Declaration]:
    return [
        address_entity,
        user_entity,
        sensitive_attribute,
        user_info_dto,
        user_service,
        user_facade,
    ]


@pytest.fixture
def sample_graph(sample_declarations: list[ir.Declaration]) -> DeclarationGraph:
    """The sample shop graph: one facade and one dto."""
    return DeclarationGraph(sample_declarations)


@pytest.fixture
def sample_graph_file(tmp_path: Path, sample_declarations: list[ir.Declaration]) -> Path:
    """The sample graph serialized as a JSON graph document."""
    document = ir.GraphDocument(declarations=sample_declarations)
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(document.model_dump(mode="json"), indent=2))
    return path


@pytest.fixture
def single_operation_controller():
    """
    Factory for a Finder controller with one string-parameter operation.

    Usage: single_operation_controller("Find", ir.HttpVerb.GET, "{q}", ["q"])
    """

    def build(
        name: str, verb: ir.HttpVerb, route: str, parameter_names: list[str]
    ) -> ir.ControllerDeclaration:
        binding = bind_route(route, [ir.Parameter(name=n, type=STRING) for n in parameter_names])
        operation = ir.OperationDescriptor(
            source_member_name=name,
            http_verb=verb,
            route_template=route,
            route_param_names=binding.route_param_names,
            generated_method_name=name,
            return_type=INT,
            parameters=binding.parameters,
            request_envelope=plan_request_envelope(verb, name, binding),
        )
        descriptor = ir.FacadeDescriptor(
            source_identity="Shop.FinderFacade",
            controller_name="Finder",
            service_type=ir.NamedType(name="Shop.IFinder"),
            controller_namespace="Shop.Controllers",
            dto_namespace="Shop.Controllers",
            operations=(operation,),
        )
        return ControllerSynthesizer().build(descriptor)

    return build
