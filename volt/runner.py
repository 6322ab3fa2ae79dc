"""
Suite runner.

Executes a suite's requests in order: substitute variables, send, evaluate
assertions, capture chain variables for the following requests, and
record everything in a run report.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from .accel import Accelerator, ExecutionTier, ReferenceTier, get_accelerator
from .extraction import ChainVariable, ChainVariableStore, describe_source
from .json_path import Found
from .reporting import RequestRecord, Reporter
from .suite import AuthConfig, EngineName, RequestSpec, Suite
from .transport import HTTPRequest, HTTPTransport, TransportError

logger = logging.getLogger(__name__)

RecordCallback = Callable[[RequestRecord], None]


async def resolve_tier(
    engine: EngineName | str,
    accelerator: Accelerator | None = None,
) -> ExecutionTier:
    """
    Execution tier for ``engine``.

    The accelerated tier is loaded on first use.

    Raises:
        AccelerationLoadError: If the accelerated kernel cannot be loaded
    """
    if EngineName(engine) == EngineName.ACCELERATED:
        return await (accelerator or get_accelerator()).ensure_loaded()
    return ReferenceTier()


def build_request(
    spec: RequestSpec,
    suite: Suite,
    variables: dict[str, str],
    tier: ExecutionTier,
) -> HTTPRequest:
    """Substitute ``variables`` into every templated field of ``spec``."""
    return HTTPRequest(
        url=tier.substitute(spec.url, variables),
        method=spec.method,
        headers=tier.substitute_headers(spec.headers, variables),
        body=tier.substitute(spec.body, variables),
        auth=_substitute_auth(spec.auth, variables, tier),
        timeout_ms=suite.defaults.timeout_ms,
        follow_redirects=suite.defaults.follow_redirects,
    )


def _substitute_auth(
    auth: AuthConfig | None, variables: dict[str, str], tier: ExecutionTier
) -> AuthConfig | None:
    if auth is None:
        return None
    fields = {"token": auth.token, "key": auth.key, "username": auth.username, "password": auth.password}
    present = [name for name, value in fields.items() if value]
    substituted = tier.substitute_batch([fields[name] for name in present], variables)
    return replace(auth, **dict(zip(present, substituted)))


class SuiteRunner:
    """
    Runs a suite against live endpoints.

    Example:
        suite, _ = load_suite("checks/users.yaml")
        runner = SuiteRunner(suite)
        reporter = asyncio.run(runner.run())
        print(reporter.get_summary())
    """

    def __init__(
        self,
        suite: Suite,
        engine: EngineName | str | None = None,
        accelerator: Accelerator | None = None,
        transport: HTTPTransport | None = None,
        on_record: RecordCallback | None = None,
    ):
        self.suite = suite
        self.engine = EngineName(engine) if engine else suite.defaults.engine
        self.accelerator = accelerator
        self.transport = transport
        self.on_record = on_record
        self.variables = ChainVariableStore()

    async def run(self) -> Reporter:
        """Execute every request and return the reporter holding the results."""
        tier = await resolve_tier(self.engine, self.accelerator)
        reporter = Reporter.from_suite(self.suite, engine=tier.name)
        reporter.start_run()
        logger.info(f"Running suite {self.suite.name!r} with the {tier.name} tier")

        if self.transport is not None:
            await self._run_requests(tier, reporter, self.transport)
        else:
            async with HTTPTransport() as transport:
                await self._run_requests(tier, reporter, transport)

        reporter.finish_run(self.variables.as_variable_map())
        return reporter

    async def _run_requests(
        self, tier: ExecutionTier, reporter: Reporter, transport: HTTPTransport
    ) -> None:
        for spec in self.suite.requests:
            record = await self._run_request(spec, tier, reporter, transport)
            if record is not None and self.on_record is not None:
                self.on_record(record)

    async def _run_request(
        self,
        spec: RequestSpec,
        tier: ExecutionTier,
        reporter: Reporter,
        transport: HTTPTransport,
    ) -> RequestRecord | None:
        # Chain variables win over suite env
        variables = {**self.suite.env, **self.variables.as_variable_map()}
        request = build_request(spec, self.suite, variables, tier)

        unresolved = tier.find_variables(request.url)
        if unresolved:
            logger.debug(f"[{spec.id}] unresolved URL variables: {unresolved}")
            return reporter.skip_request(
                spec.id, f"Unresolved variables in URL: {', '.join(unresolved)}"
            )

        reporter.start_request(spec.id, resolved_url=request.url)
        try:
            response = await transport.send(request)
        except TransportError as e:
            logger.debug(f"[{spec.id}] transport error: {e}")
            return reporter.complete_request_error(spec.id, str(e), e.to_dict())

        results = tier.evaluate_batch(spec.assertions, response)

        extracted: dict[str, str] = {}
        failures: list[str] = []
        for rule in spec.extract:
            resolution = tier.extract(rule, response)
            if isinstance(resolution, Found):
                self.variables.add(
                    ChainVariable(
                        name=rule.variable_name,
                        value=resolution.value,
                        source=describe_source(rule),
                    )
                )
                extracted[rule.variable_name] = resolution.value
            else:
                logger.debug(f"[{spec.id}] could not extract {rule.variable_name!r}")
                failures.append(rule.variable_name)

        return reporter.complete_request(spec.id, response, results, extracted, failures)


async def run_suite(
    suite: Suite,
    engine: EngineName | str | None = None,
    accelerator: Accelerator | None = None,
    transport: HTTPTransport | None = None,
    on_record: RecordCallback | None = None,
) -> Reporter:
    """Convenience wrapper around ``SuiteRunner(...).run()``."""
    runner = SuiteRunner(suite, engine, accelerator, transport, on_record)
    return await runner.run()
