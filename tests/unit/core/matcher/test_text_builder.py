"""
Tests for profile and posting text rendering.
"""
from core.matcher.dto import ProfileDTO, PostingDTO, profile_from_orm, posting_from_orm
from core.matcher.text_builder import build_posting_text, build_profile_text, github_username


class TestGithubUsername:

    def test_extracts_username(self):
        assert github_username("https://github.com/ada-l") == "ada-l"
        assert github_username("https://github.com/ada/repo") == "ada"

    def test_missing_or_invalid(self):
        assert github_username(None) is None
        assert github_username("https://gitlab.com/ada") is None


class TestBuildProfileText:

    def test_includes_all_sources(self):
        profile = ProfileDTO(
            id="u1",
            name="Ada",
            resume_text="Built a compiler",
            github_url="https://github.com/ada",
            linkedin_url="https://linkedin.com/in/ada",
            skills=["Python", "Rust"],
            experience="Intern at Acme",
            education="BSc CS",
        )
        text = build_profile_text(profile)

        assert "Name: Ada" in text
        assert "Built a compiler" in text
        assert "GitHub user ada" in text
        assert "https://linkedin.com/in/ada" in text
        assert "Skills: Python, Rust" in text
        assert "Intern at Acme" in text
        assert "BSc CS" in text

    def test_placeholders_for_missing_fields(self):
        text = build_profile_text(ProfileDTO(id="u1", name="Ada", github_url="not a url"))

        assert "No resume provided" in text
        assert "Invalid GitHub URL" in text
        assert "Skills: Not specified" in text


class TestBuildPostingText:

    def test_renders_posting(self):
        posting = PostingDTO(
            id="p1", title="Data Intern", company="Acme", location="Remote",
            description="Analyse data", requirements="SQL", salary_range="$30/h",
        )
        text = build_posting_text(posting)

        assert text.splitlines()[0] == "Title: Data Intern"
        assert "Company: Acme" in text
        assert "Location: Remote" in text
        assert "Requirements: SQL" in text
        assert "Salary Range: $30/h" in text

    def test_missing_location(self):
        text = build_posting_text(PostingDTO(id="p1", title="T", company="C"))
        assert "Location: Not specified" in text
        assert "No specific requirements listed" in text


class TestOrmConversion:

    def test_roundtrip_from_rows(self, seeded):
        user = seeded["user"]
        posting = seeded["postings"][0]

        profile = profile_from_orm(user)
        dto = posting_from_orm(posting)

        assert profile.id == str(user.id)
        assert profile.skills == ["Python", "SQL"]
        assert dto.id == str(posting.id)
        assert dto.company == "Acme"
