"""Merge suite-local definitions with the standard-definitions catalog.

The merge pass takes the unmerged suites and a :class:`ResolutionContext`
and returns new suites in which

* every standard enumeration appears in every suite,
* suite classes named like a standard class inherit its properties,
  elements and commands,
* class-extensions are folded into their target classes,
* standard classes nobody defined or extended are still present.

Properties are deduplicated by name and elements by child type. The first
definition wins: the standard side when a suite class is merged with the
catalog, the existing class when an extension is folded into it.
"""

from __future__ import annotations

import copy
from typing import Iterable, List, Set

from .includes import ResolutionContext
from .logging_config import get_logger
from .model import ClassExtension, Element, Model, Property, SdefClass, Suite

logger = get_logger(__name__)

STANDARD_SUITE_NAME = "Standard Suite"
APPLICATION_CLASS_NAME = "application"


def union_properties(base: Iterable[Property], extra: Iterable[Property]) -> List[Property]:
    """``base`` followed by the properties of ``extra`` whose names are new."""
    merged = list(base)
    names = {prop.name for prop in merged}
    for prop in extra:
        if prop.name not in names:
            merged.append(prop)
            names.add(prop.name)
    return merged


def union_elements(base: Iterable[Element], extra: Iterable[Element]) -> List[Element]:
    """``base`` followed by the elements of ``extra`` whose child types are new."""
    merged = list(base)
    types = {element.type for element in merged}
    for element in extra:
        if element.type not in types:
            merged.append(element)
            types.add(element.type)
    return merged


def union_commands(base: Iterable[str], extra: Iterable[str]) -> List[str]:
    merged = []
    for command in list(base) + list(extra):
        if command not in merged:
            merged.append(command)
    return merged


def merge_with_standard(cls: SdefClass, standard: SdefClass) -> SdefClass:
    """Combine a suite class with the standard class of the same name."""
    return SdefClass(
        name=cls.name,
        plural_name=cls.plural_name if cls.plural_name is not None else standard.plural_name,
        code=cls.code or standard.code,
        description=cls.description if cls.description is not None else standard.description,
        inherits=cls.inherits if cls.inherits is not None else standard.inherits,
        properties=union_properties(standard.properties, cls.properties),
        elements=union_elements(standard.elements, cls.elements),
        responds_to=union_commands(standard.responds_to, cls.responds_to),
        is_hidden=cls.is_hidden,
    )


def extend_class(
    cls: SdefClass, extension: ClassExtension, describe_from_extension: bool = True
) -> SdefClass:
    """Fold an extension into an existing class; the class keeps its identity.

    A suite class without a description borrows the one of the first
    extension property. Standard classes keep their own description, pass
    ``describe_from_extension=False`` for those.
    """
    description = cls.description
    if description is None and describe_from_extension and extension.properties:
        description = extension.properties[0].description

    return SdefClass(
        name=cls.name,
        plural_name=cls.plural_name,
        code=cls.code,
        description=description,
        inherits=cls.inherits,
        properties=union_properties(cls.properties, extension.properties),
        elements=union_elements(cls.elements, extension.elements),
        responds_to=union_commands(cls.responds_to, extension.responds_to),
        is_hidden=cls.is_hidden,
    )


def standard_copy(standard: SdefClass) -> SdefClass:
    """Copy of a catalog class with its command list deduplicated."""
    cls = copy.deepcopy(standard)
    cls.responds_to = union_commands(cls.responds_to, [])
    return cls


def class_from_extension(extension: ClassExtension) -> SdefClass:
    """Synthesize a class for an extension whose target is defined nowhere."""
    return SdefClass(
        name=extension.extends,
        plural_name=None,
        code="",
        description=f"Extended {extension.extends}",
        inherits=None,
        properties=list(extension.properties),
        elements=list(extension.elements),
        responds_to=union_commands(extension.responds_to, []),
    )


def _find_class_index(classes: List[SdefClass], name: str) -> int:
    lowered = name.lower()
    for index, cls in enumerate(classes):
        if cls.name.lower() == lowered:
            return index
    return -1


class MergeResolver:
    """One merge pass over the suites of a single document."""

    def __init__(self, context: ResolutionContext):
        self.context = context

    def merge(self, suites: List[Suite]) -> List[Suite]:
        application_elsewhere = any(
            suite.name != STANDARD_SUITE_NAME and suite.find_class(APPLICATION_CLASS_NAME)
            for suite in suites
        )
        extended_names = {ext.extends for suite in suites for ext in suite.class_extensions}

        staged = []
        for suite in suites:
            classes = list(suite.classes)
            if suite.name == STANDARD_SUITE_NAME and application_elsewhere:
                logger.debug(
                    f"Dropping '{APPLICATION_CLASS_NAME}' from '{STANDARD_SUITE_NAME}', "
                    "another suite defines it"
                )
                classes = [cls for cls in classes if cls.name != APPLICATION_CLASS_NAME]
            staged.append(classes)

        defined_names = {cls.name for classes in staged for cls in classes}

        merged_suites = []
        for suite, classes in zip(suites, staged):
            merged_suites.append(
                self.merge_suite(suite, classes, defined_names, extended_names)
            )
        return merged_suites

    def merge_suite(
        self,
        suite: Suite,
        classes: List[SdefClass],
        defined_names: Set[str],
        extended_names: Set[str],
    ) -> Suite:
        standard_classes = self.context.standard_classes

        enumerations = list(suite.enumerations)
        present = {enumeration.name for enumeration in enumerations}
        for name, enumeration in self.context.standard_enumerations.items():
            if name not in present:
                enumerations.append(copy.deepcopy(enumeration))

        merged_classes = []
        for cls in classes:
            standard = standard_classes.get(cls.name)
            if standard is not None:
                logger.debug(f"Merging '{cls.name}' in '{suite.name}' with its standard definition")
                cls = merge_with_standard(cls, standard)
            merged_classes.append(cls)

        for extension in suite.class_extensions:
            index = _find_class_index(merged_classes, extension.extends)
            if index >= 0:
                logger.debug(f"Folding extension of '{extension.extends}' into the suite class")
                merged_classes[index] = extend_class(merged_classes[index], extension)
            elif extension.extends in standard_classes:
                logger.debug(f"Folding extension of '{extension.extends}' into its standard class")
                standard = copy.deepcopy(standard_classes[extension.extends])
                merged_classes.append(
                    extend_class(standard, extension, describe_from_extension=False)
                )
            else:
                logger.debug(f"Creating class '{extension.extends}' from its extension")
                merged_classes.append(class_from_extension(extension))

        present_classes = {cls.name for cls in merged_classes}
        for name, standard in standard_classes.items():
            if name in defined_names or name in extended_names or name in present_classes:
                continue
            logger.debug(f"Adding unmodified standard class '{name}' to '{suite.name}'")
            merged_classes.append(standard_copy(standard))

        return Suite(
            name=suite.name,
            code=suite.code,
            description=suite.description,
            classes=merged_classes,
            enumerations=enumerations,
            commands=list(suite.commands),
            class_extensions=[],
        )


def merge_model(model: Model, context: ResolutionContext | None = None) -> Model:
    """Return a new model with all class-extensions folded away.

    Running the merge again on its own output with the same context yields an
    equal model.
    """
    context = context or ResolutionContext()
    suites = MergeResolver(context).merge(model.suites)

    return Model(
        suites=suites,
        standard_classes=dict(context.standard_classes),
        includes=list(context.includes) or list(model.includes),
        uses_fallback_definitions=context.uses_fallback or model.uses_fallback_definitions,
    )
