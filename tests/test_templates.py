"""Tests for HTML resume templates (Classic, Modern) and shared helpers."""


# ======================================================================
# Base class helper: _strip_protocol
# ======================================================================


class TestBaseStripProtocol:
    def test_strip_https(self):
        from ojtech_resume.templates.base import ResumeTemplate

        assert ResumeTemplate._strip_protocol("https://example.com") == "example.com"

    def test_strip_http(self):
        from ojtech_resume.templates.base import ResumeTemplate

        assert ResumeTemplate._strip_protocol("http://example.com") == "example.com"

    def test_no_protocol(self):
        from ojtech_resume.templates.base import ResumeTemplate

        assert ResumeTemplate._strip_protocol("example.com") == "example.com"

    def test_trailing_slash(self):
        from ojtech_resume.templates.base import ResumeTemplate

        assert ResumeTemplate._strip_protocol("HTTPS://github.com/jo/") == "github.com/jo"


# ======================================================================
# Classic Template
# ======================================================================


class TestClassicTemplate:
    def _doc(self, **overrides):
        from ojtech_resume.services.resume_document import ContactInfo, ResumeDocument

        fields = {"contact": ContactInfo(name="Jane Doe", email="jane@test.com")}
        fields.update(overrides)
        return ResumeDocument(**fields)

    def test_heading_present(self):
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        html = ClassicResumeTemplate().render(self._doc())
        assert "<h1>Jane Doe</h1>" in html
        assert "<title>Resume - Jane Doe</title>" in html

    def test_centered_header(self):
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        html = ClassicResumeTemplate().render(self._doc())
        assert "text-align: center" in html

    def test_no_headline(self):
        from ojtech_resume.services.resume_document import ContactInfo
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        doc = self._doc(contact=ContactInfo(name="Jane Doe", title="Data Analyst"))
        assert 'class="headline"' not in ClassicResumeTemplate().render(doc)

    def test_no_education_when_empty(self):
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        html = ClassicResumeTemplate().render(self._doc())
        assert 'id="education"' not in html

    def test_education_section(self):
        from ojtech_resume.services.resume_document import EducationEntry
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        doc = self._doc(education=EducationEntry(university="UBC", major="BSc CS"))
        html = ClassicResumeTemplate().render(doc)
        assert 'id="education"' in html
        assert "<h3>UBC</h3>" in html
        assert "BSc CS" in html
        assert "Graduation:" not in html

    def test_skills_section(self):
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        html = ClassicResumeTemplate().render(self._doc(skills=("Python", "Docker")))
        assert '<span class="skill-item">Python</span>' in html
        assert '<span class="skill-item">Docker</span>' in html

    def test_links_are_text_not_anchors(self):
        from ojtech_resume.services.resume_document import ContactInfo
        from ojtech_resume.templates.classic import ClassicResumeTemplate

        doc = self._doc(contact=ContactInfo(name="Jane", portfolio="https://jane.dev/"))
        html = ClassicResumeTemplate().render(doc)
        assert "Portfolio: jane.dev" in html
        assert "<a " not in html


# ======================================================================
# Modern Template
# ======================================================================


class TestModernTemplate:
    def _doc(self, **overrides):
        from ojtech_resume.services.resume_document import ContactInfo, ResumeDocument

        fields = {"contact": ContactInfo(name="Jane Doe", email="jane@test.com", phone="555")}
        fields.update(overrides)
        return ResumeDocument(**fields)

    def test_heading_present(self):
        from ojtech_resume.templates.modern import ModernResumeTemplate

        assert "<h1>Jane Doe</h1>" in ModernResumeTemplate().render(self._doc())

    def test_dark_banner(self):
        from ojtech_resume.templates.modern import ModernResumeTemplate

        assert "background-color: #2a2a2a" in ModernResumeTemplate().render(self._doc())

    def test_pipe_separated_contact_line(self):
        from ojtech_resume.templates.modern import ModernResumeTemplate

        html = ModernResumeTemplate().render(self._doc())
        assert '<div class="contact-info">jane@test.com | 555</div>' in html

    def test_no_headline_without_title_or_experience(self):
        from ojtech_resume.templates.modern import ModernResumeTemplate

        assert 'class="headline"' not in ModernResumeTemplate().render(self._doc())

    def test_experience_section(self):
        from ojtech_resume.services.resume_document import ExperienceEntry
        from ojtech_resume.templates.modern import ModernResumeTemplate

        doc = self._doc(
            experience=(
                ExperienceEntry(
                    title="Engineer",
                    company="Acme",
                    date_range="Jan 2023 - Present",
                    achievements=("Built APIs",),
                ),
            )
        )
        html = ModernResumeTemplate().render(doc)
        assert "<h3>Engineer</h3>" in html
        assert "Acme • Jan 2023 - Present" in html
        assert "<li>Built APIs</li>" in html


# ======================================================================
# Registry
# ======================================================================


class TestTemplateRegistry:
    def test_list_templates_includes_all(self):
        from ojtech_resume.templates import list_templates

        assert list_templates() == ["classic", "modern"]

    def test_get_template_by_name(self):
        from ojtech_resume.templates import get_template
        from ojtech_resume.templates.modern import ModernResumeTemplate

        assert isinstance(get_template("modern"), ModernResumeTemplate)

    def test_get_unknown_template(self):
        import pytest

        from ojtech_resume.templates import get_template

        with pytest.raises(ValueError, match="Available: classic, modern"):
            get_template("jake")
