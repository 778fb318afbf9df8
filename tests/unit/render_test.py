"""Unit tests for rendering records back to Rust source."""

from optstruct.core.generate import generate
from optstruct.core.parse import parse_record
from optstruct.core.render import render_attribute, render_record
from optstruct.models import (
    Attribute,
    AttributeRules,
    AttrsMode,
    AttrsRule,
    DocMode,
    DocRule,
    TransformConfig,
)


def test_named_struct() -> None:
    record = parse_record("pub struct S<T> { pub a: T, b: Option<u8> }")

    assert render_record(record) == "pub struct S<T> {\n    pub a: T,\n    b: Option<u8>,\n}\n"


def test_tuple_struct_with_where_clause() -> None:
    record = parse_record("struct W<T>(T) where T: Copy;")

    assert render_record(record) == "struct W<T>(\n    T,\n) where T: Copy;\n"


def test_unit_and_empty_structs() -> None:
    assert render_record(parse_record("struct U;")) == "struct U;\n"
    assert render_record(parse_record("struct E {}")) == "struct E {}\n"


def test_generated_struct_with_attributes() -> None:
    record = parse_record(
        """
        /// A user.
        #[derive(Debug)]
        pub struct User {
            /// The name.
            #[serde(default)]
            name: String,
        }
        """
    )
    rules = AttributeRules(
        attrs=AttrsRule(mode=AttrsMode.ADD, attrs=(Attribute(path="derive", tokens="(Default)"),)),
        doc=DocRule(mode=DocMode.SAME),
        field_attrs=AttrsRule(mode=AttrsMode.KEEP),
        field_doc=True,
    )

    generated = generate(record, TransformConfig(name="UserPatch", attribute_rules=rules))

    assert render_record(generated) == (
        "/// A user.\n"
        "#[derive(Debug)]\n"
        "#[derive(Default)]\n"
        "pub struct UserPatch {\n"
        "    /// The name.\n"
        "    #[serde(default)]\n"
        "    name: Option<String>,\n"
        "}\n"
    )


def test_doc_attribute_rendering() -> None:
    assert render_attribute(Attribute.doc(" Plain")) == "/// Plain"
    assert render_attribute(Attribute.doc("Tight")) == "///Tight"
    assert render_attribute(Attribute.doc(' Has "quotes"')) == '/// Has "quotes"'
    assert render_attribute(Attribute.doc("two\nlines")) == '#[doc = "two\nlines"]'
    assert render_attribute(Attribute(path="doc", tokens=' = "a\\tb"')) == '#[doc = "a\\tb"]'
    assert render_attribute(Attribute.doc("/ slashes")) == '#[doc = "/ slashes"]'


def test_rendered_docs_parse_back_to_the_same_text() -> None:
    record = parse_record('#[doc = "x"]\n#[doc = " y"]\n#[doc = "/z"]\nstruct S;\n')

    rendered = render_record(record)

    assert rendered.startswith("///x\n/// y\n")
    assert [a.doc_text for a in parse_record(rendered).attrs] == ["x", " y", "/z"]
