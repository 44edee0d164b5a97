# cli.py
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from execjob.job import Job
from execjob.loader import JobFileError, load_job
from execjob.model import JobConfigError
from execjob.ui.console import Console, set_console, get_console

DEFAULT_JOB_FILE = "execjob_job.py"


def find_job_files() -> list[Path]:
    """
    Find all job files in the current directory.

    Returns:
        List of Path objects for job files
    """
    job_files = []
    current_dir = Path(".")

    default_job = current_dir / DEFAULT_JOB_FILE
    if default_job.exists():
        job_files.append(default_job)

    for path in current_dir.glob("*_job.py"):
        if path != default_job:
            job_files.append(path)

    return sorted(job_files)


def discover_job(job_arg: str | None) -> Path:
    """
    Discover job file from argument or default.

    Raises:
        SystemExit: If the job file cannot be found or several candidates exist
    """
    console = get_console()

    if job_arg:
        job_path = Path(job_arg)
        if not job_path.exists() and job_path.suffix != ".py":
            job_path = Path(str(job_path) + ".py")
        if not job_path.exists():
            console.print_error(
                "Job file not found",
                f"Could not find job file: {job_arg}",
                suggestion="Create a job file or specify a different path:\n  execjob run --job my_job.py",
            )
            sys.exit(1)
        return job_path

    job_files = find_job_files()

    if len(job_files) == 0:
        console.print_error(
            "No job file found",
            "Could not find any job files.",
            details=[
                "Looked for:",
                f"  {DEFAULT_JOB_FILE}",
                "  *_job.py",
            ],
            suggestion=f"Create a job file:\n  {DEFAULT_JOB_FILE}\n\nOr specify one explicitly:\n  execjob run --job my_job.py",
        )
        sys.exit(1)

    if len(job_files) > 1:
        file_list = "\n".join(f"  {f}" for f in job_files)
        console.print_error(
            "Multiple job files found",
            "Found multiple job files. Please specify which one to use:",
            details=[file_list],
            suggestion=f"Specify a job explicitly:\n  execjob run --job {job_files[0]}",
        )
        sys.exit(1)

    return job_files[0]


def parse_pairs(pairs: tuple[str, ...], what: str) -> list[tuple[str, str]]:
    """Split NAME=VALUE options, keeping everything after the first '='."""
    out = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise JobConfigError(f"{what} must look like NAME=VALUE, got: {pair!r}")
        out.append((name, value))
    return out


def apply_overrides(job: Job, args, envs, cwd, wrapper) -> Job:
    """Apply command-line overrides on top of what the job file configured."""
    if wrapper:
        job.set_arg_wrapper(*wrapper)
    for name, value in parse_pairs(args, "--arg"):
        job.arg(name, value)
    for key, value in parse_pairs(envs, "--env"):
        job.set_env(key, value)
    if cwd:
        job.set_working_directory(cwd, strict=True)
    return job


def job_options(f):
    """Options shared by run and show."""
    f = click.option(
        "--wrapper",
        nargs=2,
        default=None,
        metavar="OPEN CLOSE",
        help="Argument delimiters (default: < >)",
    )(f)
    f = click.option("--cwd", default=None, help="Working directory for every command")(f)
    f = click.option("--env", "envs", multiple=True, metavar="KEY=VALUE", help="Set an environment variable (disables inheritance)")(f)
    f = click.option("--arg", "args", multiple=True, metavar="NAME=VALUE", help="Set a named argument")(f)
    f = click.option(
        "--job",
        "job_file",
        default=None,
        envvar="EXECJOB_JOB",
        help=f"Job file path (defaults to {DEFAULT_JOB_FILE} if present)",
    )(f)
    return f


def _load(job_file, args, envs, cwd, wrapper) -> tuple[Path, Job]:
    job_path = discover_job(job_file)
    job = load_job(job_path)
    return job_path, apply_overrides(job, args, envs, cwd, wrapper)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
def cli(debug):
    """execjob: run a short list of shell commands in order."""
    console = Console(debug=debug)
    set_console(console)
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@job_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
def run(job_file, args, envs, cwd, wrapper, as_json):
    """Run a job file."""
    console = get_console()

    try:
        job_path, job = _load(job_file, args, envs, cwd, wrapper)

        if not as_json:
            console.print_run_started(job_file=job_path.name, step_count=len(job.steps))

        result = job.run()

        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
        else:
            console.print_results(result, step_count=len(job.steps))

        if not result:
            sys.exit(1)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except (JobFileError, JobConfigError) as e:
        console.print_error("Invalid job", str(e))
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command()
@job_options
def show(job_file, args, envs, cwd, wrapper):
    """Print the commands a job would run, without running them."""
    console = get_console()

    try:
        _job_path, job = _load(job_file, args, envs, cwd, wrapper)
    except (JobFileError, JobConfigError) as e:
        console.print_error("Invalid job", str(e))
        sys.exit(1)

    console.print_plan(job.render(), [s.directive.value for s in job.steps])
    if job.working_directory is not None:
        console.print_info(f"\nWorking directory: {job.working_directory}")
    if job.env is not None:
        console.print_info(f"Environment: {', '.join(sorted(job.env)) or '(empty)'}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
