"""
Dispatch the behaviors of a repository: gather, deptrace, measure, triage, coordinate.

PROMPT> RUN_ID_DIR=/absolute/path/to/run/20261019_083000 REPO_DIR=/absolute/path/to/repo python -m behaviordispatch.plan.run_dispatch_pipeline

In order to resume an unfinished run, use the same RUN_ID_DIR.
If it's an already finished run, then remove the "999-pipeline_complete.txt" file.
"""
from dataclasses import dataclass, field
from datetime import datetime
import logging
import json
import threading
from typing import Optional
import luigi
from pathlib import Path
from behaviordispatch.coordinate.coordinate_behaviors import coordinate_all
from behaviordispatch.deptrace.deptrace_behaviors import deptrace_all
from behaviordispatch.domain.behavior import BehaviorGathered
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream
from behaviordispatch.domain.dispatch_config import DispatchConfig
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.domain.stage_failure import StageFailure
from behaviordispatch.estimator.estimator import LLMEstimator, ModelTier
from behaviordispatch.gather.basket_json import basket_to_json, load_basket
from behaviordispatch.gather.gather_local_behaviors import gather_local_behaviors
from behaviordispatch.llm_factory import get_llm, get_llm_names_by_priority, is_valid_llm_name
from behaviordispatch.measure.measure_behaviors import measure_all
from behaviordispatch.plan.dispatch_outputs import archive_results_to_dict, resolve_output_dir, write_coordination_outputs, write_prioritization_outputs
from behaviordispatch.plan.filenames import FilenameEnum, ExtraFilenameEnum
from behaviordispatch.plan.pipeline_environment import PipelineEnvironment
from behaviordispatch.triage.triage_behaviors import collect_delivered_names, triage_all
from behaviordispatch.utils.dispatch_config_locator import DispatchConfigLocator

logger = logging.getLogger(__name__)

def log_failures(task_name: str, failures: list[StageFailure]) -> None:
    for failure in failures:
        logger.warning(f"{task_name}: {failure.gathered.behavior.slug} failed in {failure.stage}. {failure.error_type}: {failure.error_message}")

class DispatchTask(luigi.Task):
    # Default it to the current timestamp, eg. 19841231_235959
    # Path to the 'run/{run_id}' directory
    run_id_dir = luigi.Parameter(default=Path('run') / datetime.now().strftime("%Y%m%d_%H%M%S"))

    # The repository with the '.behavior' dir.
    repo_dir = luigi.Parameter(default=Path('.'))

    # Owner of the repository, used in the behavior identities.
    org = luigi.Parameter(default="local")

    # LLM to use for the default model tier. When empty, the llm with the best priority in llm_config.json is used.
    llm_models = luigi.ListParameter(default=[])

    # Optional DispatchContext, with estimator, config and cancel signal.
    # When not provided, the context is created from dispatch_config.json and llm_config.json.
    _dispatch_context = luigi.Parameter(default=None, significant=False, visibility=luigi.parameter.ParameterVisibility.PRIVATE)

    def file_path(self, filename: FilenameEnum) -> Path:
        return Path(self.run_id_dir) / filename.value

    def local_target(self, filename: FilenameEnum) -> luigi.LocalTarget:
        return luigi.LocalTarget(self.file_path(filename))

    def input_path(self, key: str) -> Path:
        return Path(self.input()[key].path)

    def get_repo_dir(self) -> Path:
        return Path(self.repo_dir).resolve()

    def get_dispatch_context(self) -> DispatchContext:
        if self._dispatch_context is not None:
            return self._dispatch_context
        return create_dispatch_context(self.llm_models)

    def write_json_output(self, text: str) -> None:
        with self.output().open("w") as f:
            f.write(text)

    def run(self):
        """
        Don't override this method. Instead override the run_inner() method.
        """
        try:
            self.run_inner()
        except Exception as e:
            # Re-raise the exception with a more descriptive message
            raise Exception(f"Failed to run {self.__class__.__name__} for run_id_dir: {self.run_id_dir!r}") from e

    def run_inner(self):
        raise NotImplementedError("Subclasses must implement this method.")


def create_dispatch_context(llm_models: list[str]) -> DispatchContext:
    """
    The default model tier uses the first of llm_models, else the model from dispatch_config.json, else the best priority.
    The fast and smart tiers are only set when dispatch_config.json names a model for them.
    """
    locator = DispatchConfigLocator.load()
    config = DispatchConfig.load(locator.dispatch_config_json_path)

    default_llm_name: Optional[str] = llm_models[0] if llm_models else config.models.get(ModelTier.DEFAULT.value)
    llm_by_tier = {ModelTier.DEFAULT: get_llm(default_llm_name)}
    for tier in (ModelTier.FAST, ModelTier.SMART):
        llm_name = config.models.get(tier.value)
        if llm_name:
            llm_by_tier[tier] = get_llm(llm_name)
    return DispatchContext(estimator=LLMEstimator(llm_by_tier), config=config)


class GatherTask(DispatchTask):
    """
    Snapshot of the behaviors in the repository, with their content hash and status.
    """
    def output(self):
        return self.local_target(FilenameEnum.GATHERED)

    def run_inner(self):
        repo_dir = self.get_repo_dir()
        gathered = gather_local_behaviors(repo_dir, org=self.org, repo=repo_dir.name)
        self.write_json_output(basket_to_json(gathered))


class DeptraceTask(DispatchTask):
    """
    The direct and transitive dependencies of each behavior.
    """
    def requires(self):
        return {
            'gathered': self.clone(GatherTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.DEPTRACED)

    def run_inner(self):
        context = self.get_dispatch_context()
        gathered = load_basket(self.input_path('gathered'), BehaviorGathered.from_dict)
        result = deptrace_all(gathered, context)
        log_failures(self.__class__.__name__, result.failures)
        self.write_json_output(basket_to_json(result.deptraced))


class MeasureTask(DispatchTask):
    """
    Gain, cost and effect of each behavior.
    """
    def requires(self):
        return {
            'gathered': self.clone(GatherTask),
            'deptraced': self.clone(DeptraceTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.MEASURED)

    def run_inner(self):
        context = self.get_dispatch_context()
        gathered = load_basket(self.input_path('gathered'), BehaviorGathered.from_dict)
        deptraced = load_basket(self.input_path('deptraced'), BehaviorDeptraced.from_dict)
        result = measure_all(gathered, deptraced, context)
        log_failures(self.__class__.__name__, result.failures)
        self.write_json_output(basket_to_json(result.measured))


class TriageTask(DispatchTask):
    """
    Decide which behaviors to work on now, soon or later.
    """
    def requires(self):
        return {
            'gathered': self.clone(GatherTask),
            'deptraced': self.clone(DeptraceTask),
            'measured': self.clone(MeasureTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.TRIAGED)

    def run_inner(self):
        context = self.get_dispatch_context()
        gathered = load_basket(self.input_path('gathered'), BehaviorGathered.from_dict)
        deptraced = load_basket(self.input_path('deptraced'), BehaviorDeptraced.from_dict)
        measured = load_basket(self.input_path('measured'), BehaviorMeasured.from_dict)
        result = triage_all(measured, deptraced, context, delivered_names=collect_delivered_names(gathered))
        logger.info(f"Triage stats: {result.stats.to_dict()!r}")
        self.write_json_output(basket_to_json(result.triaged))


class CoordinateTask(DispatchTask):
    """
    Group the triaged behaviors into ranked workstreams.
    """
    def requires(self):
        return {
            'deptraced': self.clone(DeptraceTask),
            'measured': self.clone(MeasureTask),
            'triaged': self.clone(TriageTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.WORKSTREAMS)

    def run_inner(self):
        deptraced = load_basket(self.input_path('deptraced'), BehaviorDeptraced.from_dict)
        measured = load_basket(self.input_path('measured'), BehaviorMeasured.from_dict)
        triaged = load_basket(self.input_path('triaged'), BehaviorTriaged.from_dict)
        result = coordinate_all(triaged, deptraced, measured)
        self.write_json_output(basket_to_json(result.workstreams))


class PrioritizationOutputsTask(DispatchTask):
    """
    Write dependencies.md, prioritization.md and prioritization.json to the output dir.
    The run dir gets a summary of what was written and archived.
    """
    def requires(self):
        return {
            'deptraced': self.clone(DeptraceTask),
            'measured': self.clone(MeasureTask),
            'triaged': self.clone(TriageTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.PRIORITIZATION_OUTPUTS)

    def run_inner(self):
        context = self.get_dispatch_context()
        deptraced = load_basket(self.input_path('deptraced'), BehaviorDeptraced.from_dict)
        measured = load_basket(self.input_path('measured'), BehaviorMeasured.from_dict)
        triaged = load_basket(self.input_path('triaged'), BehaviorTriaged.from_dict)
        output_dir = resolve_output_dir(self.get_repo_dir(), context.config)
        results = write_prioritization_outputs(output_dir, deptraced, measured, triaged)
        self.write_json_output(json.dumps(archive_results_to_dict(output_dir, results), indent=2))


class CoordinationOutputsTask(DispatchTask):
    """
    Write coordination.md and coordination.json to the output dir.
    """
    def requires(self):
        return {
            'workstreams': self.clone(CoordinateTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.COORDINATION_OUTPUTS)

    def run_inner(self):
        context = self.get_dispatch_context()
        workstreams = load_basket(self.input_path('workstreams'), BehaviorWorkstream.from_dict)
        output_dir = resolve_output_dir(self.get_repo_dir(), context.config)
        results = write_coordination_outputs(output_dir, workstreams)
        self.write_json_output(json.dumps(archive_results_to_dict(output_dir, results), indent=2))


class FullDispatchPipeline(DispatchTask):
    def requires(self):
        return {
            'gathered': self.clone(GatherTask),
            'deptraced': self.clone(DeptraceTask),
            'measured': self.clone(MeasureTask),
            'triaged': self.clone(TriageTask),
            'workstreams': self.clone(CoordinateTask),
            'prioritization_outputs': self.clone(PrioritizationOutputsTask),
            'coordination_outputs': self.clone(CoordinationOutputsTask),
        }

    def output(self):
        return self.local_target(FilenameEnum.PIPELINE_COMPLETE)

    def run_inner(self):
        with self.output().open("w") as f:
            f.write("Full pipeline executed successfully.\n")


@dataclass
class ExecutePipeline:
    run_id_dir: Path
    repo_dir: Path
    llm_models: list[str]
    org: str = "local"
    dispatch_context: Optional[DispatchContext] = None
    full_dispatch_pipeline_task: Optional[FullDispatchPipeline] = field(default=None, init=False)
    luigi_build_return_value: Optional[bool] = field(default=None, init=False)

    def setup(self) -> None:
        if not self.run_id_dir.exists():
            raise FileNotFoundError(f"The run_id_dir does not exist: {self.run_id_dir!r}")
        if not self.run_id_dir.is_dir():
            raise NotADirectoryError(f"The run_id_dir is not a directory: {self.run_id_dir!r}")
        if not self.repo_dir.is_dir():
            raise NotADirectoryError(f"The repo_dir is not a directory: {self.repo_dir!r}")

        # One context for all the tasks, so they share the config and the cancel signal.
        if self.dispatch_context is None:
            self.dispatch_context = create_dispatch_context(self.llm_models)

        self.full_dispatch_pipeline_task = FullDispatchPipeline(
            run_id_dir=self.run_id_dir,
            repo_dir=self.repo_dir,
            org=self.org,
            llm_models=self.llm_models,
            _dispatch_context=self.dispatch_context,
        )

    @classmethod
    def resolve_llm_models(cls, specified_llm_model: Optional[str]) -> list[str]:
        if not specified_llm_model:
            llm_models = get_llm_names_by_priority()[:1]
            logger.info(f"No LLM model specified, using the llm with the best priority: {llm_models!r}")
            return llm_models

        if not is_valid_llm_name(specified_llm_model):
            logger.error(f"Invalid LLM model: {specified_llm_model!r}. Please check your llm_config.json file and add the model.")
            raise ValueError(f"Invalid LLM model: {specified_llm_model!r}. Please check your llm_config.json file and add the model.")
        logger.info(f"Using the specified LLM model: {specified_llm_model!r}")
        return [specified_llm_model]

    def cancel(self) -> None:
        """Stop the run. The estimator calls that are in flight are allowed to finish."""
        if self.dispatch_context is not None:
            self.dispatch_context.cancel_event.set()

    @property
    def has_pipeline_complete_file(self) -> bool:
        file_path = self.run_id_dir / FilenameEnum.PIPELINE_COMPLETE.value
        return file_path.exists()

    def run(self):
        if self.full_dispatch_pipeline_task is None:
            raise ValueError("setup() must be called before run()")

        self.luigi_build_return_value = luigi.build(
            [self.full_dispatch_pipeline_task],
            local_scheduler=True,
            workers=1,
        )

        logger.info(f"luigi_build_return_value: {self.luigi_build_return_value}")
        logger.info(f"has_pipeline_complete_file: {self.has_pipeline_complete_file}")


if __name__ == '__main__':
    import colorlog
    import sys
    from llama_index.core.instrumentation import get_dispatcher
    from behaviordispatch.llm_util.track_activity import TrackActivity

    pipeline_environment = PipelineEnvironment.from_env()
    try:
        run_id_dir: Path = pipeline_environment.get_run_id_dir()
        repo_dir: Path = pipeline_environment.get_repo_dir()
    except ValueError as e:
        msg = f"RUN_ID_DIR or REPO_DIR is invalid. Error: {e!r}"
        logger.error(msg)
        print(f"Exiting... {msg}")
        sys.exit(1)

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Log messages on the console
    colored_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt='%Y-%m-%d %H:%M:%S',
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red,bg_white',
        }
    )
    stdout_handler = colorlog.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(colored_formatter)
    stdout_handler.setLevel(logging.DEBUG)
    logger.addHandler(stdout_handler)

    # Capture logs messages to 'run/yyyymmdd_hhmmss/log.txt'
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    log_file: Path = run_id_dir / ExtraFilenameEnum.LOG_TXT.value
    file_handler = logging.FileHandler(log_file, mode='a')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    logger.info(f"pipeline_environment: {pipeline_environment!r}")

    track_activity = TrackActivity(jsonl_file_path=run_id_dir / ExtraFilenameEnum.TRACK_ACTIVITY_JSONL.value, write_to_logger=False)
    get_dispatcher().add_event_handler(track_activity)

    try:
        llm_models = ExecutePipeline.resolve_llm_models(pipeline_environment.llm_model)
        execute_pipeline = ExecutePipeline(run_id_dir=run_id_dir, repo_dir=repo_dir, llm_models=llm_models)
        execute_pipeline.setup()
    except Exception as e:
        logger.error(f"Failed to setup pipeline: {e}")
        sys.exit(1)

    logger.info(f"execute_pipeline: {execute_pipeline!r}")

    try:
        execute_pipeline.run()
    except Exception as e:
        logger.error(f"Failed to run pipeline: {e}")
        sys.exit(1)
