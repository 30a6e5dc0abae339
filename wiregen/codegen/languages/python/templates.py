"""
Built-in declaration templates for Python output.

Each template renders exactly one declaration. Block tags sit on lines of
their own; with ``trim_blocks`` an inline closing tag would swallow the
line break that follows it.
"""

STRUCT_TEMPLATE = """\
{% set dataclasses = import_module("dataclasses") %}
{% set wire = import_module(wire_module) %}
{% set members = struct_members(spec) %}
@{{ dataclasses }}.dataclass(kw_only=True{{ ", unsafe_hash=True" if is_hashable(spec) else "" }})
class {{ def_name(spec) }}{{ "(Exception)" if spec.is_exception else "" }}:
{% if spec.description %}
    {{ spec.description | literal }}
{% endif %}
{% for member in members %}
    {{ member.attribute }}: {{ member.annotation }}{{ member.default }}
{% endfor %}
{% set scope = new_scope() %}
{% set fields = scope.new_name("fields") %}

    def to_wire(self):
        {{ fields }} = []
{% for member in members %}
{% set field = member.field %}
{% set attr = "self." ~ member.attribute %}
{% if field.required %}
        {{ fields }}.append({{ wire }}.Field({{ field.id }}, {{ to_wire(field.spec, attr) }}))
{% else %}
        if {{ attr }} is not None:
            {{ fields }}.append({{ wire }}.Field({{ field.id }}, {{ to_wire(field.spec, attr) }}))
{% endif %}
{% endfor %}
        return {{ wire }}.Value.from_struct({{ wire }}.Struct({{ fields }}))
{% set scope = new_scope() %}
{% set value = scope.new_name("value") %}
{% set kwargs = scope.new_name("kwargs") %}
{% set item = scope.new_name("field") %}

    @classmethod
    def from_wire(cls, {{ value }}):
        {{ kwargs }} = {}
{% if members %}
        for {{ item }} in {{ value }}.get_struct().fields:
{% for member in members %}
{% set field = member.field %}
            {{ "if" if loop.first else "elif" }} {{ item }}.id == {{ field.id }} and {{ item }}.value.type == {{ type_code(field.spec) }}:
                {{ kwargs }}[{{ member.attribute | literal }}] = {{ from_wire(field.spec, item ~ ".value") }}
{% endfor %}
{% endif %}
        return cls(**{{ kwargs }})
"""

ENUM_TEMPLATE = """\
{% set enum = import_module("enum") %}
class {{ def_name(spec) }}({{ enum }}.IntEnum):
{% if spec.description %}
    {{ spec.description | literal }}
{% endif %}
{% for item in spec.items %}
    {{ constant_case(item.name) }} = {{ item.value }}
{% endfor %}
{% if not spec.items and not spec.description %}
    pass
{% endif %}
"""

TYPEDEF_TEMPLATE = """\
{{ def_name(spec) }} = {{ type_reference(spec.target) }}
"""

CONSTANT_TEMPLATE = """\
{{ constant_case(const.name) }}: {{ type_reference(const.spec) }} = {{ const.value | literal }}
"""

LIST_HELPER_TEMPLATE = """\
{% set wire = import_module(wire_module) %}
{% set scope = new_scope() %}
{% set items = scope.new_name("items") %}
{% set item = scope.new_name("item") %}
def {{ to_name }}({{ items }}):
    return {{ wire }}.Value.from_list({{ wire }}.ValueList({{ type_code(spec.value_spec) }}, [{{ to_wire(spec.value_spec, item) }} for {{ item }} in {{ items }}]))
{% set scope = new_scope() %}
{% set value = scope.new_name("value") %}
{% set item = scope.new_name("item") %}

def {{ from_name }}({{ value }}):
    return [{{ from_wire(spec.value_spec, item) }} for {{ item }} in {{ value }}.get_list().values]
"""

SET_HELPER_TEMPLATE = """\
{% set wire = import_module(wire_module) %}
{% set scope = new_scope() %}
{% set items = scope.new_name("items") %}
{% set item = scope.new_name("item") %}
def {{ to_name }}({{ items }}):
    return {{ wire }}.Value.from_set({{ wire }}.ValueList({{ type_code(spec.value_spec) }}, [{{ to_wire(spec.value_spec, item) }} for {{ item }} in {{ items }}]))
{% set scope = new_scope() %}
{% set value = scope.new_name("value") %}
{% set item = scope.new_name("item") %}

def {{ from_name }}({{ value }}):
{% if hashable %}
    return {{ "{" }}{{ from_wire(spec.value_spec, item) }} for {{ item }} in {{ value }}.get_set().values}
{% else %}
    return [{{ from_wire(spec.value_spec, item) }} for {{ item }} in {{ value }}.get_set().values]
{% endif %}
"""

MAP_HELPER_TEMPLATE = """\
{% set wire = import_module(wire_module) %}
{% set scope = new_scope() %}
{% set items = scope.new_name("items") %}
{% set key = scope.new_name("key") %}
{% set item = scope.new_name("value") %}
def {{ to_name }}({{ items }}):
    return {{ wire }}.Value.from_map({{ wire }}.MapItemList({{ type_code(spec.key_spec) }}, {{ type_code(spec.value_spec) }}, [{{ wire }}.MapItem({{ to_wire(spec.key_spec, key) }}, {{ to_wire(spec.value_spec, item) }}) for {{ key }}, {{ item }} in {{ items }}{{ ".items()" if hashable else "" }}]))
{% set scope = new_scope() %}
{% set value = scope.new_name("value") %}
{% set item = scope.new_name("item") %}

def {{ from_name }}({{ value }}):
{% if hashable %}
    return {{ "{" }}{{ from_wire(spec.key_spec, item ~ ".key") }}: {{ from_wire(spec.value_spec, item ~ ".value") }} for {{ item }} in {{ value }}.get_map().items}
{% else %}
    return [({{ from_wire(spec.key_spec, item ~ ".key") }}, {{ from_wire(spec.value_spec, item ~ ".value") }}) for {{ item }} in {{ value }}.get_map().items]
{% endif %}
"""
