import sys
from pathlib import Path

from streamlit.web import cli as streamlit_cli

APP_PATH: Path = Path(__file__).with_name("streamlit_app.py")


def build_streamlit_argv(extra_args: list[str]) -> list[str]:
    return ["streamlit", "run", str(APP_PATH), *extra_args]


def main() -> None:
    """Start the FaceSwap Studio web UI; extra arguments go to ``streamlit run``."""

    print("🎭 Starting FaceSwap Studio.")
    print("For a one-off composite from files, run `faceswap-composite`.")
    sys.argv = build_streamlit_argv(sys.argv[1:])
    sys.exit(streamlit_cli.main())


if __name__ == "__main__":
    main()
