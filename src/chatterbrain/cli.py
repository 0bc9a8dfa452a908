"""Command line interface for chatterbrain."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from .brain import Brain
from .config import ChatterConfig, load_config
from .data import load_lexicon
from .logging import configure_logging, get_logger
from .scoring import ReplyScorer
from .training import Trainer

LOGGER = get_logger(__name__)

NO_REPLY = "I have nothing to say to that."

CORPUS_ARGUMENT = typer.Argument(..., help="Line-oriented training text files.")
CORPUS_OPTION = typer.Option(
    ...,
    "--corpus",
    help="Training text file; repeat the option to learn several files.",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Path to a YAML or JSON configuration file.",
)
REPORT_OPTION = typer.Option(
    None,
    help="Optional path to write the training report as JSON.",
)
CANDIDATES_OPTION = typer.Option(
    None,
    help="Number of candidate replies to score; defaults to the configured value.",
)
COUNT_OPTION = typer.Option(1, help="How many utterances to print.")
SEED_OPTION = typer.Option(None, help="Seed for the random generator.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log learning and generation details.")

app = typer.Typer(help="Learn word statistics from text and babble them back.")


@app.callback()
def main(verbose: bool = VERBOSE_OPTION) -> None:
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)


def _load(config_path: Path | None, seed: int | None = None) -> tuple[Brain, ChatterConfig]:
    overrides = [{"brain": {"seed": seed}}] if seed is not None else []
    config = load_config(config_path, overrides)
    lexicon = load_lexicon(config.lexicon)
    brain = Brain.from_config(config.brain, lexicon=lexicon)
    return brain, config


def _train(brain: Brain, config: ChatterConfig, corpus: list[Path]) -> Trainer:
    trainer = Trainer(brain, config.trainer)
    for path in corpus:
        if not path.exists():
            raise typer.BadParameter(f"{path} does not exist", param_hint="corpus")
        trainer.learn_file(path)
    return trainer


@app.command()
def learn(
    corpus: list[Path] = CORPUS_ARGUMENT,
    config_path: Path | None = CONFIG_OPTION,
    report: Path | None = REPORT_OPTION,
) -> None:
    """Learn CORPUS files and print what the brain now knows."""

    brain, config = _load(config_path)
    trainer = _train(brain, config, corpus)
    typer.echo(json.dumps(brain.stats().to_dict(), indent=2))
    report = report or config.trainer.report_path
    if report is not None:
        trainer.save_training_report(report)


@app.command()
def respond(
    prompt: str = typer.Argument(..., help="Message to reply to."),
    corpus: list[Path] = CORPUS_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    candidates: int | None = CANDIDATES_OPTION,
    seed: int | None = SEED_OPTION,
) -> None:
    """Reply to PROMPT using what was learned from the corpus."""

    brain, config = _load(config_path, seed)
    _train(brain, config, corpus)
    response = config.response
    reply = brain.get_response(
        prompt,
        candidates or response.candidates,
        response.blend_with_parent,
        response.correct_spelling,
        ReplyScorer(message=prompt, max_length=response.max_reply_length),
    )
    typer.echo(reply if reply is not None else NO_REPLY)


@app.command()
def babble(
    corpus: list[Path] = CORPUS_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    count: int = COUNT_OPTION,
    seed: int | None = SEED_OPTION,
) -> None:
    """Print random utterances built from the corpus."""

    brain, config = _load(config_path, seed)
    _train(brain, config, corpus)
    for _ in range(count):
        utterance = brain.get_random_utterance()
        if utterance is None:
            LOGGER.warning("Could not generate an utterance")
            raise typer.Exit(code=1)
        typer.echo(utterance)


@app.command()
def tokens(text: str = typer.Argument(..., help="Text to split.")) -> None:
    """Print the tokens the brain would learn from TEXT, one per line."""

    brain, _ = _load(None)
    for word in brain.split_words(text):
        typer.echo(word)


if __name__ == "__main__":
    app()
