# build.py
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path

import PyInstaller.__main__

SCRIPT_NAME = "file_collector/main.py"
BASE_OUTPUT_NAME = "file_collector"
ICON_PATH = "app_icon.ico"
EXE_SUFFIX = ".exe" if os.name == "nt" else ""


def check_upx():
    """Checks if UPX is available in the system's PATH."""
    return shutil.which("upx") is not None


def build_args(script_path: Path, icon_file_obj, use_upx=True, console=True):
    args = [
        str(script_path.resolve()),
        "--onefile",
        f"--name={BASE_OUTPUT_NAME}",
        "--paths=.",
        "--hidden-import=pyperclip",
        "--hidden-import=tiktoken",
        "--hidden-import=tiktoken_ext",
        "--hidden-import=tiktoken_ext.openai_public",
    ]

    if not console:
        args.append("--noconsole")
    if icon_file_obj:
        args.append(f"--icon={icon_file_obj.resolve()}")

    if use_upx and check_upx():
        print("UPX found, it will be used.")
        upx_dir_path = Path(shutil.which("upx")).parent
        args.append(f"--upx-dir={upx_dir_path.resolve()}")
    elif use_upx:
        print("UPX not found, compression disabled.")
    return args


def clean_previous_build(output_name_for_final_exe):
    build_dir = Path("build")
    if build_dir.is_dir():
        print(f"Removing 'build' folder: {build_dir}")
        shutil.rmtree(build_dir)

    for old_spec_file in Path(".").glob(f"{BASE_OUTPUT_NAME}*.spec"):
        print(f"Removing previous .spec file: {old_spec_file}")
        old_spec_file.unlink()

    dist_dir = Path("dist")
    dist_dir.mkdir(parents=True, exist_ok=True)
    for previous_exe_path in (
        dist_dir / f"{output_name_for_final_exe}{EXE_SUFFIX}",
        dist_dir / f"{BASE_OUTPUT_NAME}{EXE_SUFFIX}",
    ):
        if previous_exe_path.exists():
            print(f"Removing previous build: {previous_exe_path}")
            previous_exe_path.unlink()
    return dist_dir


def build_executable(use_upx=True, console=True):
    """Builds a one-file executable into dist/ and returns its path."""
    version_string = datetime.now().strftime("%y.%m.%d")
    output_name_for_final_exe = f"{BASE_OUTPUT_NAME}_v{version_string}"

    script_path = Path(SCRIPT_NAME)
    if not script_path.is_file():
        print(f"Error: main script '{script_path}' not found. Run build.py from the project root.")
        sys.exit(1)

    icon_file_obj = Path(ICON_PATH)
    if not icon_file_obj.is_file():
        icon_file_obj = None

    args = build_args(script_path, icon_file_obj, use_upx=use_upx, console=console)
    dist_dir = clean_previous_build(output_name_for_final_exe)

    print("PyInstaller arguments:", " ".join(args), "\nBuild started...")
    PyInstaller.__main__.run(args)

    generated_exe_path = dist_dir / f"{BASE_OUTPUT_NAME}{EXE_SUFFIX}"
    final_exe_path = dist_dir / f"{output_name_for_final_exe}{EXE_SUFFIX}"

    if not generated_exe_path.exists():
        print(f"\nError: expected PyInstaller output {generated_exe_path} was not found.")
        sys.exit(1)

    print(f"Renaming {generated_exe_path} to {final_exe_path}")
    shutil.move(str(generated_exe_path), str(final_exe_path))
    print(f"\nBuild finished! File: '{final_exe_path}'")
    return final_exe_path


if __name__ == "__main__":
    build_executable()
