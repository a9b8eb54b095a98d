# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic structure planning.

Turns a school's curriculum selections into the list of classes (and the
course content modules of each class) that should exist for the current
academic year. The plan is pure data; SchoolService persists it.

Tracks:
    Primary: P1-P6, one core module per primary subject.
    O-level: S1-S3, core modules for core subjects plus supplementary
        modules for option subjects.
    A-level: S4-S6 for every subject combination, a core module named
        after the combination plus supplementary option modules.
    TVET: L3-L5 for every specialization, a core module named after the
        specialization plus supplementary option modules.

Example:
    >>> plan = plan_academic_structure("Green Hills", request, "2025-2026")
    >>> plan[0].name
    'P1 GreenHills 2025-2026'
"""

import re
from dataclasses import dataclass, field
from typing import Any

from schoolhub.models.enums import ModuleType
from schoolhub.models.school import SchoolAcademicRequest

PRIMARY_LEVELS = tuple(f"P{i}" for i in range(1, 7))
O_LEVEL_LEVELS = tuple(f"S{i}" for i in range(1, 4))
A_LEVEL_LEVELS = tuple(f"S{i}" for i in range(4, 7))
TVET_LEVELS = ("L3", "L4", "L5")

CURRICULUM_FRAMEWORKS = ["REB"]

_WHITESPACE = re.compile(r"\s+")


@dataclass
class PlannedModule:
    title: str
    module_type: ModuleType


@dataclass
class PlannedClass:
    name: str
    modules: list[PlannedModule] = field(default_factory=list)


def academic_year_label(year: int) -> str:
    """Return the academic year label starting in ``year``, e.g. ``"2025-2026"``."""
    return f"{year}-{year + 1}"


def compact(value: str) -> str:
    """Remove all whitespace from a name."""
    return _WHITESPACE.sub("", value)


def _supplementary(subjects: list[str] | None) -> list[PlannedModule]:
    return [PlannedModule(title, ModuleType.SUPPLEMENTARY) for title in subjects or []]


def plan_academic_structure(
    school_name: str,
    request: SchoolAcademicRequest,
    academic_year: str,
) -> list[PlannedClass]:
    """Plan the classes and modules for a school's selected tracks.

    Args:
        school_name: Display name of the school; whitespace is removed in
            class names.
        request: Validated curriculum selections.
        academic_year: Academic year label used as class name suffix.

    Returns:
        Planned classes in track order: primary, O-level, A-level, TVET.
    """
    school = compact(school_name)
    classes: list[PlannedClass] = []

    if request.primary_subjects_offered:
        for level in PRIMARY_LEVELS:
            classes.append(
                PlannedClass(
                    name=f"{level} {school} {academic_year}",
                    modules=[
                        PlannedModule(subject, ModuleType.CORE_CONTENT)
                        for subject in request.primary_subjects_offered
                    ],
                )
            )

    if request.o_level_core_subjects:
        for level in O_LEVEL_LEVELS:
            modules = [
                PlannedModule(subject, ModuleType.CORE_CONTENT)
                for subject in request.o_level_core_subjects
            ]
            modules.extend(_supplementary(request.o_level_option_subjects))
            classes.append(PlannedClass(f"{level} {school} {academic_year}", modules))

    if request.a_level_subject_combination:
        for combination in request.a_level_subject_combination:
            for level in A_LEVEL_LEVELS:
                modules = [PlannedModule(combination, ModuleType.CORE_CONTENT)]
                modules.extend(_supplementary(request.a_level_option_subjects))
                classes.append(
                    PlannedClass(f"{level} {combination} {school} {academic_year}", modules)
                )

    if request.tvet_specialization:
        # Levels vary slowest
        for level in TVET_LEVELS:
            for specialization in request.tvet_specialization:
                modules = [PlannedModule(specialization, ModuleType.CORE_CONTENT)]
                modules.extend(_supplementary(request.tvet_option_subjects))
                classes.append(
                    PlannedClass(
                        f"{level} {compact(specialization)} {school} {academic_year}",
                        modules,
                    )
                )

    return classes


def build_academic_profile(request: SchoolAcademicRequest) -> dict[str, Any]:
    """Build the academic profile stored on the school.

    Subject lists that were not provided are stored as empty lists.
    """
    return {
        "academic_years": [],
        "grade_levels": [],
        "subject_areas": [],
        "curriculum_frameworks": list(CURRICULUM_FRAMEWORKS),
        "default_grading_scale_description": request.default_grading_scale_description,
        "primary_subjects_offered": request.primary_subjects_offered or [],
        "primary_pass_mark": request.primary_pass_mark,
        "o_level_core_subjects": request.o_level_core_subjects or [],
        "o_level_option_subjects": request.o_level_option_subjects or [],
        "o_level_examination_types": request.o_level_examination_types or [],
        "o_level_assessment": request.o_level_assessment or [],
        "a_level_subject_combination": request.a_level_subject_combination or [],
        "a_level_option_subjects": request.a_level_option_subjects or [],
        "a_level_pass_mark": request.a_level_pass_mark,
        "tvet_specialization": request.tvet_specialization or [],
        "tvet_option_subjects": request.tvet_option_subjects or [],
    }
