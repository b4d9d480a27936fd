"""Tests for ProblemDetail parsing of vendor error bodies."""

import pytest
from httpx import Response

from saas_client_core.errors.models import ProblemDetail


class TestFromResponse:
    @pytest.mark.unit
    def test_problem_json_body(self):
        response = Response(
            status_code=409,
            headers={"content-type": "application/problem+json"},
            json={
                "type": "https://api.acme.test/problems/duplicate-contact",
                "title": "Contact already exists",
                "status": 409,
                "detail": "A contact with email a@example.com already exists",
                "instance": "/contacts",
            },
        )

        problem = ProblemDetail.from_response(response)

        assert problem == ProblemDetail(
            type="https://api.acme.test/problems/duplicate-contact",
            title="Contact already exists",
            status=409,
            detail="A contact with email a@example.com already exists",
            instance="/contacts",
        )

    @pytest.mark.unit
    def test_vendor_members_become_extensions(self):
        """HubSpot-style bodies carry a correlation id and a list of errors."""
        response = Response(
            status_code=400,
            json={
                "status": "error",
                "message": "Property values were not valid",
                "correlationId": "c0ffee",
                "errors": [{"message": "Invalid email", "in": "email"}],
            },
        )

        problem = ProblemDetail.from_response(response)

        assert problem is not None
        assert problem.status is None
        assert problem.extensions == {
            "message": "Property values were not valid",
            "correlationId": "c0ffee",
            "errors": [{"message": "Invalid email", "in": "email"}],
        }

    @pytest.mark.unit
    def test_problem_shape_without_problem_content_type(self):
        response = Response(status_code=404, json={"title": "Not Found", "detail": "No employee e-42"})

        problem = ProblemDetail.from_response(response)

        assert problem.title == "Not Found"
        assert problem.detail == "No employee e-42"
        assert problem.extensions is None

    @pytest.mark.unit
    def test_problem_content_type_with_only_vendor_members(self):
        response = Response(
            status_code=500,
            headers={"content-type": "application/problem+json; charset=utf-8"},
            json={"trace": "abc"},
        )

        problem = ProblemDetail.from_response(response)

        assert problem is not None
        assert problem.extensions == {"trace": "abc"}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "response",
        [
            Response(status_code=502, headers={"content-type": "text/html"}, text="<h1>Bad Gateway</h1>"),
            Response(status_code=400, json={"error": "invalid_grant", "code": "E1"}),
            Response(status_code=400, json=[{"message": "bad"}]),
            Response(status_code=503),
        ],
        ids=["html", "no-standard-members", "array", "empty"],
    )
    def test_not_problem_shaped(self, response):
        assert ProblemDetail.from_response(response) is None


class TestToExceptionMessage:
    @pytest.mark.unit
    def test_all_members(self):
        problem = ProblemDetail(
            type="https://api.acme.test/problems/validation",
            title="Validation Failed",
            status=422,
            detail="email is invalid",
            instance="/contacts",
            extensions={"errors": [{"field": "email"}]},
        )

        assert problem.to_exception_message().splitlines() == [
            "Validation Failed",
            "email is invalid",
            "Problem Type: https://api.acme.test/problems/validation",
            "Instance: /contacts",
            "Extension fields:",
            "  - errors: [{'field': 'email'}]",
        ]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("problem", "expected"),
        [
            (ProblemDetail(title="Conflict"), "Conflict"),
            (ProblemDetail(detail="Rate limited"), "Rate limited"),
            (ProblemDetail(title="Same", detail="Same"), "Same"),
            (ProblemDetail(), "Unknown API error"),
        ],
    )
    def test_short_forms(self, problem, expected):
        assert problem.to_exception_message() == expected
