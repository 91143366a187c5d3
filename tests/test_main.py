import json

import pytest

from release_grader.errors import ParseError, UnsupportedTypeError
from release_grader.main import RunDispatcher, main, setup
from release_grader.utils.workflow import WorkflowState


def make_states(release="v1.0.1", created="2020-02-17T05:00:01Z", kind="Functionality"):
    return WorkflowState(release=release, release_date=created, type=kind)


class CountingFactory:
    """Hands out one fake tracker and counts how often it was asked."""

    def __init__(self, tracker):
        self.tracker = tracker
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.tracker


def test_functionality_is_graded(grading_config, tracker_factory):
    factory = CountingFactory(tracker_factory())

    result = RunDispatcher(make_states(), grading_config, factory).run()

    assert result.project == 1
    assert (result.grade.late, result.grade.grade) == (1, 90)
    assert result.milestone is None
    assert factory.calls == 0


def test_functionality_ensures_milestone_when_enabled(grading_config, tracker_factory):
    tracker = tracker_factory()
    factory = CountingFactory(tracker)

    result = RunDispatcher(
        make_states(), grading_config, factory, ensure_milestone=True
    ).run()

    assert result.milestone.title == "Project 1"
    assert result.grade.grade == 90
    assert len(tracker.create_calls) == 1
    assert tracker.closed


def test_design_is_placeholder(grading_config, tracker_factory, caplog):
    caplog.set_level("INFO")
    factory = CountingFactory(tracker_factory())

    result = RunDispatcher(make_states(kind="Design"), grading_config, factory).run()

    assert result.grade is None
    assert "Hello world." in caplog.text
    assert factory.calls == 0


def test_unsupported_type_makes_no_tracker_calls(grading_config, tracker_factory):
    tracker = tracker_factory()
    factory = CountingFactory(tracker)
    dispatcher = RunDispatcher(
        make_states(kind="Extra Credit"), grading_config, factory, ensure_milestone=True
    )

    with pytest.raises(UnsupportedTypeError, match='"Extra Credit"'):
        dispatcher.run()

    assert factory.calls == 0
    assert tracker.list_calls == 0
    assert tracker.create_calls == []


def test_type_is_case_sensitive(grading_config):
    with pytest.raises(UnsupportedTypeError):
        RunDispatcher(make_states(kind="functionality"), grading_config).run()


def test_bad_release_propagates(grading_config):
    with pytest.raises(ParseError):
        RunDispatcher(make_states(release="v9.0.0"), grading_config).run()


@pytest.fixture
def action_env(monkeypatch, tmp_path):
    output_file = tmp_path / "output"
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    monkeypatch.setenv("GITHUB_REPOSITORY", "usf-cs212/project-student")
    monkeypatch.setenv("INPUT_TOKEN", "ghs_supersecret")
    monkeypatch.setenv("STATE_release", "v1.0.1")
    monkeypatch.setenv("STATE_releaseDate", "2020-02-24T05:00:00Z")
    monkeypatch.setenv("STATE_type", "Functionality")
    return output_file


def test_main_grades_and_publishes_outputs(action_env, capsys):
    assert main() == 0

    out = capsys.readouterr().out
    assert "::group::Calculating grade..." in out
    assert "Release is within 2 week(s) late." in out
    assert "::error::" not in out

    text = action_env.read_text(encoding="utf-8")
    assert "grade<<" in text
    assert "\n80\n" in text
    assert "\n2\n" in text


def test_main_fails_on_unsupported_type(action_env, monkeypatch, capsys):
    monkeypatch.setenv("STATE_type", "Extra Credit")

    assert main() == 1

    out = capsys.readouterr().out.splitlines()
    assert (
        '::error::Unable to request project grade. '
        'The value "Extra Credit" is not a valid project grade type.'
    ) in out
    assert any(line.startswith("::error::UnsupportedTypeError:") for line in out)


def test_main_fails_on_missing_state(action_env, monkeypatch, capsys):
    monkeypatch.delenv("STATE_releaseDate")

    assert main() == 1

    out = capsys.readouterr().out
    assert "Unable to request project grade. Missing saved state: releaseDate." in out


def test_main_masks_token_in_failures(action_env, monkeypatch, capsys):
    monkeypatch.setenv("STATE_release", "ghs_supersecret")

    assert main() == 1

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "::add-mask::ghs_supersecret"
    assert not any("ghs_supersecret" in line for line in lines[1:])
    assert "::error::Unable to request project grade. Unable to parse project from release ***." in lines


def test_setup_saves_release(monkeypatch, tmp_path):
    event = tmp_path / "event.json"
    event.write_text(
        json.dumps(
            {
                "action": "published",
                "release": {
                    "tag_name": "v2.0.0",
                    "created_at": "2020-03-08T20:00:00Z",
                    "html_url": "https://github.com/usf-cs212/project-student/releases/tag/v2.0.0",
                },
            }
        ),
        encoding="utf-8",
    )
    state_file = tmp_path / "state"
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("GITHUB_STATE", str(state_file))
    monkeypatch.setenv("INPUT_TYPE", "Design")

    assert setup() == 0

    text = state_file.read_text(encoding="utf-8")
    for expected in ("release<<", "\nv2.0.0\n", "\n2020-03-08T20:00:00Z\n", "type<<", "\nDesign\n"):
        assert expected in text


def test_setup_requires_release_event(monkeypatch, tmp_path, capsys):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"action": "opened"}), encoding="utf-8")
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("INPUT_TYPE", "Design")

    assert setup() == 1
    assert "not triggered by a release event" in capsys.readouterr().out


def test_setup_requires_type_input(monkeypatch, tmp_path, capsys):
    event = tmp_path / "event.json"
    event.write_text(
        json.dumps({"release": {"tag_name": "v1.0.0", "created_at": "2020-02-16T20:00:00Z"}}),
        encoding="utf-8",
    )
    state_file = tmp_path / "state"
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event))
    monkeypatch.setenv("GITHUB_STATE", str(state_file))

    assert setup() == 1

    out = capsys.readouterr().out
    assert "ConfigurationError: Input required and not supplied: type" in out
    assert "::error::Unable to set up project grade." in out
    assert not state_file.exists()
