"""
Swift code generator implementation.

Generates ScriptingBridge protocols, enumerations and bindings from a
merged sdef model.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ....model import Enumeration, Model, Property, SdefClass
from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.naming import NamingCase, capitalize_first
from .naming import create_swift_sanitizer, escape_swift_keyword, setter_suffix
from .types import SWIFT_TYPE_TABLE, SwiftTypeConfig, SwiftTypeMapper

logger = get_logger(__name__)

# Classes that also get the generic close/save/print/delete/duplicate/move contract
STANDARD_CLASS_NAMES = frozenset({"window", "document", "application"})

DEFAULT_IMPORTS = ["Foundation", "ScriptingBridge"]

# Appended to a class interface whose name collides with a fixed declaration
CLASS_NAME_COLLISION_SUFFIX = "Class"
ENUM_NAME_COLLISION_SUFFIX = "Enum"

SAVE_OPTION_CASES = [("yes", "yes "), ("no", "no  "), ("ask", "ask ")]

# Stand-in for references to an enumeration that declares no cases
EMPTY_ENUMERATION_TYPE = "OSType"

# Indentation the templates are written with
TEMPLATE_INDENT = 4

# Unprefixed names that would shadow a type the generated code itself uses
FLAT_ALIAS_EXCLUDED = frozenset(
    {"AEKeyword", "Data", "SBApplication", "SBObject", "SBElementArray", "NSObject", "URL"}
    | {swift_type for swift_type in SWIFT_TYPE_TABLE.values() if swift_type.isidentifier()}
)


class SwiftGenerator(CodeGenerator):
    """Code generator for Swift ScriptingBridge bindings."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Swift generator with configuration."""
        super().__init__(config or GeneratorConfig())

        self.sanitizer = create_swift_sanitizer()
        self.add_comments = self.config.add_comments
        self.generate_class_names_enum = self.config.generate_class_names_enum
        self.strongly_typed_extensions = self.config.generate_strongly_typed_extensions
        self.namespace_typealiases = self.config.generate_namespace_typealiases
        self.flat_typealiases = self.config.generate_flat_typealiases
        self.bundle_identifier = self.config.bundle_identifier

        custom = self.config.custom or {}
        self.imports = list(DEFAULT_IMPORTS) + [
            module for module in custom.get("extra_imports", []) if module not in DEFAULT_IMPORTS
        ]
        self.type_config = SwiftTypeConfig(
            type_overrides={
                key.lower(): value for key, value in custom.get("type_overrides", {}).items()
            }
        )

        # Per-run state, reset by generate()
        self.basename = ""
        self._fixed_names: Dict[str, str] = {}
        self._type_names: Dict[str, str] = {}
        self._empty_enumerations: List[str] = []
        self.type_mapper = SwiftTypeMapper(self.class_reference, self.type_config)

    def get_template_directory(self) -> Optional[Path]:
        """Return the Swift templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    @property
    def language_name(self) -> str:
        return "swift"

    @property
    def file_extension(self) -> str:
        return ".swift"

    # Naming

    def _reset(self, basename: str):
        self.basename = basename
        self._fixed_names = {
            "application": f"{basename}Application",
            "object": f"{basename}Object",
            "element_array": f"{basename}ElementArray",
            "save_options": f"{basename}SaveOptions",
            "generic_methods": f"{basename}GenericMethods",
            "application_protocol": f"{basename}ApplicationProtocol",
            "class_names_enum": f"{basename}ClassNames",
        }
        self._type_names = {}
        self._empty_enumerations = []

    def _prefixed(self, name: str) -> str:
        return f"{self.basename}{self.sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE, escape=False)}"

    def class_interface_name(self, name: str) -> str:
        """``<basename><PascalName>``, suffixed when it collides with a fixed declaration."""
        interface = self._prefixed(name)
        if interface in self._fixed_names.values():
            interface += CLASS_NAME_COLLISION_SUFFIX
        return interface

    def enumeration_name(self, name: str) -> str:
        enum_name = self._prefixed(name)
        if enum_name in self._fixed_names.values() and enum_name != self._fixed_names["save_options"]:
            enum_name += ENUM_NAME_COLLISION_SUFFIX
        return enum_name

    def class_reference(self, name: str) -> str:
        """Swift type for a base type naming another definition of the model."""
        known = self._type_names.get(name) or self._type_names.get(name.lower())
        if known:
            return known
        return self.class_interface_name(name)

    def property_name(self, name: str) -> str:
        return self.sanitizer.camel(name)

    def element_accessor_name(self, element_type: str) -> str:
        """Pluralized collection accessor: lower-cased child type plus ``s``."""
        return self.sanitizer.camel(element_type.lower() + "s")

    def untyped_accessor_name(self, accessor: str) -> str:
        """Swift name of the raw accessor behind a strongly typed one."""
        return "untyped" + capitalize_first(accessor.strip("`"))

    def setter_name(self, property_name: str) -> str:
        return f"set{setter_suffix(property_name)}"

    def application_function_name(self) -> str:
        return self.basename[:1].lower() + self.basename[1:] + "Application"

    # Generation

    def generate(self, model: Model, basename: str) -> str:
        """Generate the complete Swift source for a merged model."""
        self._reset(basename)

        classes = self._unique_classes(model)
        enumerations = self._unique_enumerations(model)
        for enumeration in enumerations:
            self._type_names.setdefault(enumeration.name, self.enumeration_name(enumeration.name))
            self._type_names.setdefault(
                enumeration.name.lower(), self.enumeration_name(enumeration.name)
            )
        for cls in classes:
            self._type_names.setdefault(cls.name, self.class_interface_name(cls.name))
            self._type_names.setdefault(cls.name.lower(), self.class_interface_name(cls.name))
        for name in self._empty_enumerations:
            self._type_names.setdefault(name, EMPTY_ENUMERATION_TYPE)
            self._type_names.setdefault(name.lower(), EMPTY_ENUMERATION_TYPE)

        parts = [self._render_header(), self._render_standard_definitions()]

        enum_names = []
        for enumeration in enumerations:
            parts.append(self.generate_enumeration(enumeration))
            enum_names.append(self.enumeration_name(enumeration.name))

        class_protocols = []
        for cls in classes:
            parts.append(self.generate_class(cls))
            class_protocols.append(self.class_interface_name(cls.name))

        if self.strongly_typed_extensions:
            extensions = self._render_typed_accessors(classes)
            if extensions:
                parts.append(extensions)

        if self.generate_class_names_enum:
            parts.append(self._render_class_names(classes))

        parts.append(
            self.render_template(
                "application.swift.j2",
                {
                    "add_comments": self.add_comments,
                    "application_protocol": self._fixed_names["application_protocol"],
                    "bundle_identifier": self._swift_string(self.bundle_identifier),
                    "application_function": self.application_function_name(),
                },
            )
        )
        parts.append(
            self.render_template(
                "bindings.swift.j2",
                {
                    "class_protocols": class_protocols,
                    "application_protocol": self._fixed_names["application_protocol"],
                    "generic_methods": self._fixed_names["generic_methods"],
                },
            )
        )

        if self.namespace_typealiases or self.flat_typealiases:
            parts.append(self._render_typealiases(enum_names + class_protocols))

        logger.info(
            f"Generated {len(enumerations)} enumerations and {len(classes)} class protocols for {basename}"
        )
        return "\n".join(part.strip("\n") + "\n" for part in parts)

    def format_code(self, code: str) -> str:
        """Collapse blank lines, then re-indent to the configured indent size."""
        code = super().format_code(code)
        if self.config.indent_size == TEMPLATE_INDENT:
            return code
        return "\n".join(self._reindent(line) for line in code.split("\n"))

    def _reindent(self, line: str) -> str:
        content = line.lstrip(" ")
        levels, remainder = divmod(len(line) - len(content), TEMPLATE_INDENT)
        return " " * (levels * self.config.indent_size + remainder) + content

    def _unique_classes(self, model: Model) -> List[SdefClass]:
        """Classes in model order, one per interface name (first wins)."""
        seen = set()
        classes = []
        for cls in model.all_classes:
            interface = self.class_interface_name(cls.name)
            if interface in seen:
                logger.debug(f"Skipping duplicate class '{cls.name}'")
                continue
            seen.add(interface)
            classes.append(cls)
        return classes

    def _unique_enumerations(self, model: Model) -> List[Enumeration]:
        """Enumerations in model order, skipping names already declared.

        An enumeration without enumerators cannot be declared in Swift; it is
        dropped and references to it fall back to the raw four-character code.
        """
        seen = {self._fixed_names["save_options"]}
        enumerations = []
        for enumeration in model.all_enumerations:
            enum_name = self.enumeration_name(enumeration.name)
            if enum_name == self._fixed_names["save_options"]:
                self._type_names.setdefault(enumeration.name, enum_name)
                self._type_names.setdefault(enumeration.name.lower(), enum_name)
            if enum_name in seen:
                logger.debug(f"Skipping duplicate enumeration '{enumeration.name}'")
                continue
            if not enumeration.enumerators:
                if enumeration.name not in self._empty_enumerations:
                    logger.warning(
                        f"Skipping enumeration '{enumeration.name}': it has no enumerators"
                    )
                    self._empty_enumerations.append(enumeration.name)
                continue
            seen.add(enum_name)
            enumerations.append(enumeration)
        return enumerations

    def _render_header(self) -> str:
        return self.render_template(
            "header.swift.j2",
            {
                "basename": self.basename,
                "imports": self.imports,
                "aliases": {
                    "application": self._fixed_names["application"],
                    "object": self._fixed_names["object"],
                    "element_array": self._fixed_names["element_array"],
                },
            },
        )

    def _render_standard_definitions(self) -> str:
        return self.render_template(
            "standard.swift.j2",
            {
                "add_comments": self.add_comments,
                "save_options": self._fixed_names["save_options"],
                "generic_methods": self._fixed_names["generic_methods"],
                "save_cases": [{"name": name, "code": code} for name, code in SAVE_OPTION_CASES],
            },
        )

    def generate_enumeration(self, enumeration: Enumeration) -> str:
        cases = []
        seen = set()
        for enumerator in enumeration.enumerators:
            case_name = self.property_name(enumerator.name)
            if case_name in seen:
                logger.debug(f"Skipping duplicate case '{enumerator.name}' in '{enumeration.name}'")
                continue
            seen.add(case_name)
            cases.append(
                {
                    "name": case_name,
                    "code": enumerator.code,
                    "description": enumerator.description,
                }
            )

        context = {
            "add_comments": self.add_comments,
            "enum": {
                "sdef_name": enumeration.name,
                "name": self.enumeration_name(enumeration.name),
                "description": enumeration.description,
                "cases": cases,
            },
        }
        return self.render_template("enumeration.swift.j2", context)

    def generate_class(self, cls: SdefClass) -> str:
        """Render the protocol declaration of one class."""
        interface = self.class_interface_name(cls.name)

        inheritance = ["SBObjectProtocol"]
        if cls.name.lower() in STANDARD_CLASS_NAMES:
            inheritance.append(self._fixed_names["generic_methods"])
        if cls.inherits:
            parent = self.class_reference(cls.inherits)
            if parent != interface and parent not in inheritance:
                inheritance.append(parent)

        members = set()
        properties = []
        setters = []
        id_method = None

        for prop in cls.properties:
            if prop.name == "id":
                id_method = self.type_mapper.map_base_type(prop.type.base_type).name
                members.add("id")
                continue

            name = self.property_name(prop.name)
            if name in members:
                logger.debug(f"Skipping duplicate member '{name}' of '{cls.name}'")
                continue
            members.add(name)
            properties.append(
                {
                    "name": name,
                    "type": self.type_mapper.map_type(prop.type).name,
                    "description": prop.description,
                }
            )

        elements = []
        for accessor in self._element_accessors(cls, members):
            members.add(accessor["name"])
            if accessor["untyped"]:
                members.add(accessor["untyped"])
            elements.append(accessor)

        for prop in cls.properties:
            if prop.is_read_only:
                continue
            setter = self._setter_context(prop)
            if setter["name"] in members:
                continue
            members.add(setter["name"])
            setters.append(setter)

        context = {
            "add_comments": self.add_comments,
            "cls": {
                "sdef_name": cls.name,
                "name": interface,
                "description": cls.description,
                "inheritance": inheritance,
                "properties": properties,
                "id_method": id_method,
                "elements": elements,
                "setters": setters,
            },
        }
        return self.render_template("class_protocol.swift.j2", context)

    def _element_accessors(self, cls: SdefClass, members: set) -> List[Dict[str, Any]]:
        """Collection accessors of a class, skipping names taken by its properties."""
        accessors = []
        taken = set(members)
        for element in cls.elements:
            accessor = self.element_accessor_name(element.type)
            if accessor in taken:
                logger.debug(f"Skipping duplicate member '{accessor}' of '{cls.name}'")
                continue
            taken.add(accessor)
            accessors.append(
                {
                    "name": accessor,
                    "untyped": (
                        self.untyped_accessor_name(accessor)
                        if self.strongly_typed_extensions
                        else None
                    ),
                    "sdef_type": element.type,
                    "type": self.class_reference(element.type),
                }
            )
        return accessors

    def _setter_context(self, prop: Property) -> Dict[str, Any]:
        return {
            "name": self.setter_name(prop.name),
            "parameter": self.property_name(prop.name),
            "type": self.type_mapper.map_type(prop.type).name,
        }

    def _render_typed_accessors(self, classes: List[SdefClass]) -> str:
        extensions = []
        for cls in classes:
            members = {
                self.property_name(prop.name) for prop in cls.properties if prop.name != "id"
            }
            accessors = self._element_accessors(cls, members)
            if accessors:
                extensions.append(
                    {
                        "sdef_name": cls.name,
                        "protocol": self.class_interface_name(cls.name),
                        "accessors": accessors,
                    }
                )

        if not extensions:
            return ""
        return self.render_template(
            "typed_accessors.swift.j2",
            {"add_comments": self.add_comments, "extensions": extensions},
        )

    def _render_class_names(self, classes: List[SdefClass]) -> str:
        entries = []
        seen = set()
        for cls in classes:
            name = self.property_name(cls.name)
            if name in seen:
                continue
            seen.add(name)
            entries.append({"name": name, "value": self._swift_string(cls.name)})

        return self.render_template(
            "class_names.swift.j2",
            {
                "add_comments": self.add_comments,
                "class_names_enum": self._fixed_names["class_names_enum"],
                "class_names": entries,
            },
        )

    def _render_typealiases(self, declared_names: List[str]) -> str:
        """Unprefixed aliases for every generated type.

        Flat aliases live at module level, so names that would shadow a type
        the generated code refers to, or a generated declaration itself, are
        left out.
        """
        targets = [
            self._fixed_names["application"],
            self._fixed_names["object"],
            self._fixed_names["element_array"],
            self._fixed_names["save_options"],
            self._fixed_names["generic_methods"],
            self._fixed_names["application_protocol"],
        ]
        if self.generate_class_names_enum:
            targets.append(self._fixed_names["class_names_enum"])
        targets.extend(declared_names)

        aliases = []
        seen = set()
        for target in targets:
            name = target[len(self.basename):]
            if not name or name in seen or escape_swift_keyword(name) != name:
                continue
            seen.add(name)
            aliases.append({"name": name, "target": target})

        generated = set(targets) | {self.basename}
        flat_aliases = [
            alias
            for alias in aliases
            if alias["name"] not in generated and alias["name"] not in FLAT_ALIAS_EXCLUDED
        ]

        return self.render_template(
            "typealiases.swift.j2",
            {
                "add_comments": self.add_comments,
                "basename": self.basename,
                "namespace_aliases": aliases if self.namespace_typealiases else [],
                "flat_aliases": flat_aliases if self.flat_typealiases else [],
            },
        )

    @staticmethod
    def _swift_string(value: Optional[str]) -> Optional[str]:
        """Escape a value for use inside a Swift string literal."""
        if value is None:
            return None
        return value.replace("\\", "\\\\").replace('"', '\\"')


def create_swift_generator(config: Optional[Dict[str, Any]] = None) -> SwiftGenerator:
    """Create a Swift generator from a plain configuration dict."""
    from ...core.config import load_config

    return SwiftGenerator(load_config("swift", custom_config=config))
