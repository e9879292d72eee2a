"""Tests for batch deployment."""

import pytest

from skillkit import DeployOptions, DeployTarget
from skillkit.batch import batch_deploy, discover_skills
from skillkit.errors import NoSkillsFoundError, NotFoundError


@pytest.mark.asyncio
async def test_discover_skills_sorted_and_filtered(make_skill, tmp_path) -> None:
    parent = tmp_path / "skills"
    make_skill("b-skill", parent=parent)
    make_skill("a-skill", parent=parent)
    (parent / "no-manifest").mkdir()
    (parent / "README.md").write_text("not a dir")

    found = await discover_skills(parent)
    assert [p.name for p in found] == ["a-skill", "b-skill"]


@pytest.mark.asyncio
async def test_discover_missing_parent(tmp_path) -> None:
    with pytest.raises(NotFoundError):
        await discover_skills(tmp_path / "missing")


@pytest.mark.asyncio
async def test_batch_one_valid_one_invalid(make_skill, paths, tmp_path) -> None:
    parent = tmp_path / "skills"
    make_skill("good-skill", parent=parent)
    make_skill("Bad_Skill", parent=parent, dir_name="bad-skill")

    results = await batch_deploy(parent, DeployOptions(targets=[DeployTarget.CLAUDE]), paths)

    assert [r.skill_name for r in results] == ["bad-skill", "good-skill"]
    bad, good = results
    assert bad.validation_error is not None
    assert "name" in bad.validation_error
    assert bad.outcomes == []
    assert not bad.success
    assert good.validation_error is None
    assert len(good.outcomes) == 1
    assert good.outcomes[0].success
    assert good.success
    assert not (paths.home / ".claude" / "skills" / "Bad_Skill").exists()


@pytest.mark.asyncio
async def test_batch_deploy_failure_does_not_stop_others(make_skill, paths, tmp_path) -> None:
    parent = tmp_path / "skills"
    make_skill("first", parent=parent)
    make_skill("second", parent=parent)
    (paths.home / ".claude" / "skills" / "first").mkdir(parents=True)

    results = await batch_deploy(parent, DeployOptions(targets=[DeployTarget.CLAUDE]), paths)

    assert [r.success for r in results] == [False, True]
    assert results[0].outcomes[0].already_exists


@pytest.mark.asyncio
async def test_batch_no_skills_is_fatal(paths, tmp_path) -> None:
    parent = tmp_path / "empty"
    parent.mkdir()
    with pytest.raises(NoSkillsFoundError):
        await batch_deploy(parent, DeployOptions(targets=[DeployTarget.CLAUDE]), paths)


@pytest.mark.asyncio
async def test_batch_missing_parent_is_fatal(paths, tmp_path) -> None:
    with pytest.raises(NotFoundError):
        await batch_deploy(tmp_path / "nope", DeployOptions(targets=[DeployTarget.CLAUDE]), paths)
