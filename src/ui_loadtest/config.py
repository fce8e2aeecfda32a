"""
Configuration models for a load-test run.

Values come from the environment (optionally populated from a ``.env`` file
by the CLI) and can be overridden by command-line options.
"""

import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_EXECUTABLE_PATHS = [
    "C:/Program Files/Google/Chrome/Application/chrome.exe",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/usr/bin/google-chrome",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
]


class StepTimeouts(BaseModel):
    """Per-step timeouts, all in milliseconds."""

    navigation: int = Field(default=30000, gt=0, description="page.goto timeout")
    login: int = Field(default=20000, gt=0, description="Wait for the post-login URL")
    affordance: int = Field(default=15000, gt=0, description="Wait for the start button")
    race: int = Field(default=25000, gt=0, description="Overall readiness race deadline")
    structural: int = Field(default=20000, gt=0, description="Modal selector wait")
    poll_interval: int = Field(default=50, gt=0, description="Console buffer scan interval")
    click: int = Field(default=10000, gt=0, description="Best-effort click timeout")
    confirmation: int = Field(default=20000, gt=0, description="Wait for a success message")
    settle: int = Field(default=2000, ge=0, description="Pause before filling a form")


class WorkflowSelectors(BaseModel):
    """Selectors and markers of the measured workflow."""

    username: str = "#username"
    password: str = "#password"
    login_submit: str = "#login-submit"
    start_button: str = "#start-process-btn"
    modal: str = "#user-task-modal"
    ready_marker: str = Field(
        default="FORM_READY",
        description="Console text the application logs once the modal is ready",
    )
    text_fields: str = 'input[type="text"]:visible, input:not([type]):visible, textarea:visible'
    choices_container: str = ".choices:visible"
    choices_option: str = ".choices__list--dropdown .choices__item--selectable"
    first_submit: str = (
        'button[action="submit"], button#nextStepBtn, button:has-text("مرحله بعد"), '
        'button:has-text("ثبت"), button:has-text("ارسال"), .formio-submit'
    )
    confirmation: str = "text=موفقیت|پیش‌نویس با موفقیت ذخیره شد.|Task completed|ارسال شد"
    rich_text_editor: str = ".ck-editor__editable:visible"
    second_submit: str = 'button[type="submit"][name="data[submit]"].btn.btn-success:has-text("ذخیره")'
    second_confirmation: str = (
        "text=موفقیت|پیش‌نویس با موفقیت ذخیره شد.|Task completed|ارسال شد|ذخیره شد|success|ثبت شد"
    )


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class LoadTestConfig(BaseModel):
    """
    Everything one run needs: target, credentials, browser mode, timeouts.

    ``interactive`` defaults to the opposite of ``headless``: a headful run
    keeps the browsers open for inspection until the operator resumes.
    """

    login_url: str = "http://localhost:4200/login"
    target_url: str = "http://localhost:4200/nameh/pishnevis"
    post_login_url: str = Field(
        default="**/user-panel", description="URL glob confirming a successful login"
    )
    username: str = "1"
    username_template: Optional[str] = Field(
        default=None,
        description="Per-session username, e.g. 'user{index}'; overrides username",
    )
    password: str = "ABC"

    num_sessions: int = Field(default=1, ge=1)
    max_concurrency: Optional[int] = Field(default=None, ge=1)

    headless: bool = False
    interactive: Optional[bool] = None
    interact: bool = Field(default=True, description="Run best-effort form steps after measuring")
    second_form: bool = True

    executable_paths: List[str] = Field(default_factory=lambda: list(DEFAULT_EXECUTABLE_PATHS))
    launch_args: List[str] = Field(default_factory=lambda: ["--no-sandbox"])

    output_dir: str = "."
    record_console: bool = False

    timeouts: StepTimeouts = Field(default_factory=StepTimeouts)
    selectors: WorkflowSelectors = Field(default_factory=WorkflowSelectors)

    @field_validator("login_url", "target_url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"expected an http(s) URL, got {value!r}")
        return value

    @field_validator("username_template")
    @classmethod
    def _check_username_template(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            value.format(index=0)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"username_template may only use the {{index}} placeholder, got {value!r} ({e!r})"
            ) from e
        return value

    @model_validator(mode="after")
    def _default_interactive(self) -> "LoadTestConfig":
        if self.interactive is None:
            self.interactive = not self.headless
        return self

    def username_for(self, index: int) -> str:
        """Username used by session ``index``."""
        if self.username_template:
            return self.username_template.format(index=index)
        return self.username

    @classmethod
    def from_env(cls, **overrides: Any) -> "LoadTestConfig":
        """
        Create a config from environment variables.

        Keyword overrides that are not ``None`` take precedence over the
        environment, so CLI options can be passed straight through.
        """
        env_mappings = {
            "APP_URL": "login_url",
            "TARGET_URL": "target_url",
            "POST_LOGIN_URL": "post_login_url",
            "AUTH_USERNAME": "username",
            "AUTH_USERNAME_TEMPLATE": "username_template",
            "AUTH_PASSWORD": "password",
            "NUM_USERS": "num_sessions",
            "MAX_CONCURRENCY": "max_concurrency",
            "HEADLESS": "headless",
            "INTERACTIVE": "interactive",
            "INTERACT": "interact",
            "OUTPUT_DIR": "output_dir",
        }
        bool_fields = {"headless", "interactive", "interact"}

        values: Dict[str, Any] = {}
        for env_var, attr in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                values[attr] = _as_bool(value) if attr in bool_fields else value

        chrome_path = os.environ.get("CHROME_PATH")
        if chrome_path:
            values["executable_paths"] = [chrome_path] + list(DEFAULT_EXECUTABLE_PATHS)

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
