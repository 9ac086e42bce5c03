import subprocess
import sys

SEEDERS_IN_ORDER = [
    "app.seeders.1_users",
    "app.seeders.2_universities",
    "app.seeders.3_listings",
]


def run_seeder(module_name: str) -> None:
    print(f"\nRunning seeder: {module_name}")
    result = subprocess.run(
        [sys.executable, "-m", module_name],
        capture_output=True,
        text=True,
    )
    print(result.stdout)
    if result.returncode != 0:
        print(f"Seeder {module_name} exited with {result.returncode}:\n{result.stderr}")
        raise subprocess.CalledProcessError(result.returncode, module_name, result.stdout, result.stderr)
    print(f"Seeder finished: {module_name}")


def main(selected: list[str] | None = None) -> int:
    # `python -m app.seeders.run_all_seeders 2_universities` runs a single seeder
    seeders = [f"app.seeders.{name}" for name in selected] if selected else SEEDERS_IN_ORDER

    for seeder in seeders:
        try:
            run_seeder(seeder)
        except subprocess.CalledProcessError:
            # later seeders depend on the earlier ones
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
