"""Tests for turning resume content into standalone HTML."""

from __future__ import annotations

import json

import pytest

from ojtech_resume.constants import MAX_UNWRAP_DEPTH
from ojtech_resume.services.cv_errors import MalformedContent
from ojtech_resume.services.resume_document import (
    CertificationEntry,
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeDocument,
)
from ojtech_resume.services.resume_normalizer import normalize
from ojtech_resume.services.resume_renderer import (
    RenderPath,
    render,
    render_content,
    wrap_plain_text,
)

SECTION_IDS = ["summary", "skills", "experience", "projects", "education", "certifications"]

FULL_DOC = ResumeDocument(
    contact=ContactInfo(
        name="Ana Cruz",
        email="ana@example.com",
        phone="555-0100",
        location="Cebu City",
        linkedin="https://linkedin.com/in/anacruz/",
        github="https://github.com/anacruz",
        title="Software Engineering Intern",
    ),
    summary=("Builds web apps.",),
    skills=("Python", "React"),
    experience=(
        ExperienceEntry(
            title="Intern",
            company="Acme",
            location="Remote",
            date_range="Jun 2023 - Present",
            achievements=("Shipped a billing API",),
        ),
    ),
    projects=(ProjectEntry(name="Tracker", technologies="Django, HTMX", highlights=("Used daily",)),),
    education=EducationEntry(university="University of Cebu", major="CS", graduation_year="2025"),
    certifications=(CertificationEntry(name="CCNA", issuer="Cisco", date_received="May 2024"),),
)


def _section_positions(html: str) -> list[int]:
    return [html.index(f'id="{section}"') for section in SECTION_IDS]


class TestRender:
    @pytest.mark.parametrize("template_name", ["classic", "modern"])
    def test_complete_document(self, template_name):
        html = render(FULL_DOC, template_name)

        assert html.startswith("<!DOCTYPE html>")
        assert "<style>" in html
        assert "@media print" in html
        assert "<script" not in html
        assert "<link" not in html

    @pytest.mark.parametrize("template_name", ["classic", "modern"])
    def test_deterministic(self, template_name):
        assert render(FULL_DOC, template_name) == render(FULL_DOC, template_name)

    @pytest.mark.parametrize("template_name", ["classic", "modern"])
    def test_section_order(self, template_name):
        positions = _section_positions(render(FULL_DOC, template_name))
        assert positions == sorted(positions)

    def test_header_comes_first(self):
        html = render(FULL_DOC)
        assert html.index('class="header"') < html.index('id="summary"')

    def test_field_values_are_shown(self):
        html = render(FULL_DOC)

        assert "<h1>Ana Cruz</h1>" in html
        assert "ana@example.com • 555-0100 • Cebu City" in html
        assert "LinkedIn: linkedin.com/in/anacruz" in html
        assert "GitHub: github.com/anacruz" in html
        assert "Acme • Remote • Jun 2023 - Present" in html
        assert "Technologies: Django, HTMX" in html
        assert "Graduation: 2025" in html
        assert "Cisco • May 2024" in html

    def test_modern_shows_headline(self):
        html = render(FULL_DOC, "modern")
        assert '<h2 class="headline">Software Engineering Intern</h2>' in html

    def test_modern_headline_falls_back_to_latest_role(self):
        doc = ResumeDocument(
            contact=ContactInfo(name="Jo"),
            experience=(ExperienceEntry(title="Backend Intern"),),
        )
        assert '<h2 class="headline">Backend Intern</h2>' in render(doc, "modern")

    def test_unknown_template(self):
        with pytest.raises(ValueError, match="Unknown template"):
            render(FULL_DOC, "fancy")


class TestSectionOmission:
    @pytest.mark.parametrize("template_name", ["classic", "modern"])
    def test_empty_document_has_only_header(self, template_name):
        html = render(normalize({}), template_name)

        assert 'class="header"' in html
        assert "<h1></h1>" in html
        for section in SECTION_IDS:
            assert f'id="{section}"' not in html
        assert "N/A" not in html

    def test_only_populated_sections_render(self):
        doc = ResumeDocument(skills=("Go",), certifications=(CertificationEntry(name="PMP"),))
        html = render(doc)

        assert 'id="skills"' in html
        assert 'id="certifications"' in html
        for section in ("summary", "experience", "projects", "education"):
            assert f'id="{section}"' not in html

    def test_education_renders_with_any_field(self):
        doc = ResumeDocument(education=EducationEntry(major="Physics"))
        assert 'id="education"' in render(doc)

    def test_contact_lines_skip_blank_fields(self):
        html = render(ResumeDocument(contact=ContactInfo(name="Jo", phone="555")))

        assert '<div class="contact-info">555</div>' in html
        assert "contact-links" not in html.split("</style>")[1]


class TestEscaping:
    def test_markup_in_fields_is_escaped(self):
        doc = ResumeDocument(
            contact=ContactInfo(name="<script>alert(1)</script>"),
            skills=("C & C++",),
            summary=('Says "hi" <b>loudly</b>',),
        )
        html = render(doc)

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "C &amp; C++" in html
        assert "&lt;b&gt;loudly&lt;/b&gt;" in html

    def test_plain_text_wrapper_escapes(self):
        html = wrap_plain_text("Fish & Chips <3")

        assert html.startswith("<!DOCTYPE html>")
        assert "Fish &amp; Chips &lt;3" in html


class TestRenderContent:
    def test_html_is_passed_through_unchanged(self):
        raw = "<html><body>X</body></html>"
        outcome = render_content(raw)

        assert outcome.path is RenderPath.HTML
        assert outcome.html is raw
        assert outcome.document is None
        assert outcome.ok

    def test_escaped_html_is_unwrapped_then_passed_through(self):
        raw = '"\\u003chtml\\u003e<body>X</body></html>"'
        outcome = render_content(raw)

        assert outcome.path is RenderPath.HTML
        assert outcome.html == "<html><body>X</body></html>"

    def test_encoded_json_is_rendered_as_document(self):
        raw = json.dumps(json.dumps({"contactInfo": {"name": "Ana Cruz"}}))
        outcome = render_content(raw, "modern")

        assert outcome.path is RenderPath.DOCUMENT
        assert outcome.document.contact.name == "Ana Cruz"
        assert "<h1>Ana Cruz</h1>" in outcome.html

    def test_structured_object_is_rendered(self):
        outcome = render_content({"firstName": "Jo", "lastName": "Reyes"})
        assert outcome.path is RenderPath.DOCUMENT
        assert "<h1>Jo Reyes</h1>" in outcome.html

    def test_free_text_is_wrapped(self):
        outcome = render_content("Jo Reyes - backend developer")

        assert outcome.path is RenderPath.TEXT
        assert "Jo Reyes - backend developer" in outcome.html
        assert outcome.ok

    @pytest.mark.parametrize("raw", [None, "", "   \n"])
    def test_absent_content(self, raw):
        outcome = render_content(raw)

        assert outcome.path is RenderPath.EMPTY
        assert outcome.html == ""
        assert isinstance(outcome.error, MalformedContent)
        assert not outcome.ok

    @pytest.mark.parametrize("raw", [{}, [], "{}"])
    def test_empty_object_renders_header_only(self, raw):
        outcome = render_content(raw)

        assert outcome.ok
        assert outcome.path is RenderPath.DOCUMENT
        assert outcome.document == ResumeDocument.empty()
        assert "<h1></h1>" in outcome.html
        for section in SECTION_IDS:
            assert f'id="{section}"' not in outcome.html

    def test_html_inside_cv_record_is_passed_through(self):
        html = "<!DOCTYPE html><html><body>Generated CV</body></html>"
        outcome = render_content({"id": "1", "active": True, "parsedResume": html})

        assert outcome.path is RenderPath.HTML
        assert outcome.html == html

    def test_html_inside_json_content_is_passed_through(self):
        html = "<html><body>Generated CV</body></html>"
        outcome = render_content({"jsonContent": html})

        assert outcome.path is RenderPath.HTML
        assert outcome.html == html

    def test_cv_record_with_encoded_json_is_rendered(self):
        record = {"id": "1", "parsedResume": json.dumps({"contactInfo": {"name": "Ana Cruz"}})}
        outcome = render_content(record)

        assert outcome.path is RenderPath.DOCUMENT
        assert outcome.document.contact.name == "Ana Cruz"

    def test_cv_record_without_content_is_absent(self):
        outcome = render_content({"id": "1", "parsedResume": None})

        assert outcome.path is RenderPath.EMPTY
        assert isinstance(outcome.error, MalformedContent)

    def test_too_deeply_nested_json_renders_empty_resume(self):
        outcome = render_content("[" * 100_000 + "]" * 100_000)

        assert outcome.ok
        assert outcome.path is RenderPath.DOCUMENT
        assert outcome.document.is_empty

    def test_encoded_layers_are_parsed_once(self, monkeypatch: pytest.MonkeyPatch):
        raw = json.dumps({"contactInfo": {"name": "Ana Cruz"}})
        for _ in range(11):
            raw = json.dumps(raw)
        calls: list[str] = []
        real_loads = json.loads

        def counting_loads(text, *args, **kwargs):
            calls.append(text)
            return real_loads(text, *args, **kwargs)

        monkeypatch.setattr(json, "loads", counting_loads)
        outcome = render_content(raw)

        assert outcome.document.is_empty
        assert len(calls) == MAX_UNWRAP_DEPTH + 1

    def test_unrecognized_object_renders_empty_resume(self):
        outcome = render_content({"unrelated": True})

        assert outcome.ok
        assert outcome.path is RenderPath.DOCUMENT
        assert outcome.document.is_empty
