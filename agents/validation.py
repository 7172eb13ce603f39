"""
Output Validation

Turns raw reasoning-service text into validated AdvocateArgument and
JudgeRuling models. Validation is strict: any failure raises
SchemaValidationException and the trial fails. Nothing is coerced or
filled in.

Checks, in order:
1. The text contains a JSON object
2. The object matches the pydantic schema (types, 0-100 ranges, no extra keys)
3. Every rubric criterion is covered exactly once, and nothing else is
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from core.schemas.arguments import AdvocateArgument
from core.schemas.errors import ErrorCodes, SchemaValidationException
from core.schemas.market import ResolutionRubric, Side
from core.schemas.ruling import JudgeRuling


def extract_json(text: str) -> str:
    """Extract a JSON object from model text, handling fenced blocks and prose wrapping."""
    cleaned = text.strip()

    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        body = []
        for line in lines:
            if line.strip() == "```":
                break
            body.append(line)
        cleaned = "\n".join(body).strip()

    if cleaned.startswith("{"):
        return cleaned

    start = cleaned.find("{")
    if start == -1:
        return ""

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(cleaned)):
        ch = cleaned[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return cleaned[start : i + 1]
    # unbalanced; let json.loads report it
    return cleaned[start:]


def parse_json_object(text: str, *, source: str) -> dict[str, Any]:
    """
    Parse model text as a JSON object.

    Raises:
        SchemaValidationException: If no JSON object can be parsed
    """
    candidate = extract_json(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise SchemaValidationException(
            f"{source} returned invalid JSON: {e.msg}",
            details={"source": source, "preview": text[:200]},
        ) from e
    if not isinstance(data, dict):
        raise SchemaValidationException(
            f"{source} returned JSON {type(data).__name__}, expected an object",
            details={"source": source, "preview": text[:200]},
        )
    return data


def _error_list(e: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in e.errors()
    ]


def check_rubric_coverage(
    criteria: list[str],
    rubric: ResolutionRubric,
    *,
    source: str,
    field_path: str,
) -> None:
    """
    Require exactly one entry per rubric criterion and no unknown criteria.

    Raises:
        SchemaValidationException: With code RUBRIC_COVERAGE_ERROR
    """
    expected = rubric.criterion_names
    missing = [name for name in expected if name not in criteria]
    unknown = [name for name in criteria if name not in expected]
    duplicated = sorted({name for name in criteria if criteria.count(name) > 1})

    if missing or unknown or duplicated:
        problems = []
        if missing:
            problems.append(f"missing {missing}")
        if unknown:
            problems.append(f"unknown {unknown}")
        if duplicated:
            problems.append(f"duplicated {duplicated}")
        raise SchemaValidationException(
            f"{source} does not cover the rubric: {'; '.join(problems)}",
            field_path=field_path,
            details={
                "source": source,
                "missing": missing,
                "unknown": unknown,
                "duplicated": duplicated,
            },
            code=ErrorCodes.RUBRIC_COVERAGE_ERROR,
        )


def validate_advocate_output(
    text: str,
    *,
    side: Side,
    rubric: ResolutionRubric,
    model: str,
) -> AdvocateArgument:
    """
    Validate one advocate's raw output.

    The returned argument carries `model` as its provenance tag.

    Raises:
        SchemaValidationException: On any validation failure
    """
    source = f"Advocate {side.value}"
    data = parse_json_object(text, source=source)
    data["model"] = model

    try:
        argument = AdvocateArgument.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationException(
            f"{source} output failed schema validation ({e.error_count()} errors)",
            details={"source": source, "errors": _error_list(e)},
        ) from e

    if argument.side is not side:
        raise SchemaValidationException(
            f"{source} argued {argument.side.value}, expected {side.value}",
            field_path="side",
            details={"source": source, "expected": side.value, "actual": argument.side.value},
        )

    check_rubric_coverage(
        [arg.criterion for arg in argument.arguments],
        rubric,
        source=source,
        field_path="arguments",
    )
    return argument


def validate_judge_output(
    text: str,
    *,
    rubric: ResolutionRubric,
    model: str,
) -> JudgeRuling:
    """
    Validate the judge's raw output.

    Raises:
        SchemaValidationException: On any validation failure
    """
    source = "Judge"
    data = parse_json_object(text, source=source)
    data["model"] = model

    try:
        ruling = JudgeRuling.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationException(
            f"{source} output failed schema validation ({e.error_count()} errors)",
            details={"source": source, "errors": _error_list(e)},
        ) from e

    check_rubric_coverage(
        [score.criterion for score in ruling.criterion_scores],
        rubric,
        source=source,
        field_path="criterion_scores",
    )
    return ruling
