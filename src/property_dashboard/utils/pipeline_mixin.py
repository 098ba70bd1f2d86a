"""Pipeline execution mixin for data loaders.

Provides step-by-step loading for loaders that need multi-step processing.
"""

from __future__ import annotations

from typing import Iterable, Callable, Any
from abc import abstractmethod
import logging

from colorama import Fore, Style

logger = logging.getLogger('Pipeline')


class PipelineMixin:
    """Mixin for loaders that use multi-step pipeline processing.

    Use this for loaders that need:
    - Multiple sequential processing steps
    - Progress reporting
    - Error handling per step

    Usage:
        class MyLoader(PipelineMixin):
            def _load_pipeline(self, year):
                return [
                    ('Fetch', self.fetch, {'year': year}),
                    ('Parse', self.parse, {}),
                ]
    """

    # Label printed in front of each step
    STAGE: str = 'Loader'

    @abstractmethod
    def _load_pipeline(self, **pipeline_kwargs: Any) -> Iterable[tuple[str, Callable, dict[str, Any]]]:
        """Define the pipeline steps.

        Returns:
            List of tuples: (step_name, function, kwargs). Each step after the
            first receives the previous step's result as its first argument.
        """
        ...

    def _execute_pipeline(self, progress: bool = False, **pipeline_kwargs: Any) -> Any:
        """Execute the pipeline and return the final result.

        Args:
            progress: Whether to print progress messages (default: False)
            **pipeline_kwargs: Additional parameters passed to _load_pipeline()

        Returns:
            Result from the final pipeline step
        """
        pipeline = self._load_pipeline(**pipeline_kwargs)
        result = None
        started = False

        for name, func, kwargs in pipeline:
            try:
                if started:
                    result = func(result, **kwargs)
                else:
                    result = func(**kwargs)
                    started = True
                if progress:
                    self._log_step_success(name)
            except Exception as e:
                self._log_step_failure(name, e, progress)
                raise

        return result

    def _step_label(self, step_name: str) -> str:
        max_len = len('Process Rows')  # Longest step name
        padding = max(max_len - len(step_name), 0) + 4
        return f'{self.STAGE} -- {step_name} {"-" * padding}>'

    def _log_step_success(self, step_name: str) -> None:
        """Print success message for a pipeline step."""
        print(f'{self._step_label(step_name)} {Fore.GREEN}Complete{Style.RESET_ALL}')

    def _log_step_failure(self, step_name: str, error: Exception, progress: bool = False) -> None:
        """Report a failed pipeline step."""
        logger.error(f'{self.STAGE} step {step_name} failed: {error}')
        if progress:
            print(f'{self._step_label(step_name)} {Fore.RED}Failed{Style.RESET_ALL}: {error}')
