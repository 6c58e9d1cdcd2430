import os
import subprocess
import sys
import glob

def run_tests() -> int:
    test_files = sorted(glob.glob("tests/*.bricks"))

    print(f"Running {len(test_files)} tests...\n")

    failures = 0
    for test_file in test_files:
        test_name = os.path.basename(test_file)
        print(f"--- Running {test_name} ---")

        try:
            # Run the interpreter with eval option
            result = subprocess.run(
                [sys.executable, "Python/main.py", test_file, "eval"],
                capture_output=True,
                text=True,
                encoding='utf-8'
            )

            if result.stdout:
                # Show the result or the error
                lines = [l for l in result.stdout.splitlines() if l.startswith("Result:") or "error:" in l]
                for line in lines:
                    print(line)

            if result.stderr:
                print(f"Error:\n{result.stderr}")

            if result.returncode != 0: failures += 1

        except OSError as e:
            print(f"Execution failed: {e}")
            failures += 1

        print()

    print(f"{len(test_files) - failures} passed, {failures} failed")
    return 1 if failures else 0

if __name__ == "__main__":
    sys.exit(run_tests())
