"""
Pricing Engine - turns event parameters into appointments, revenue, cost,
margin and annualized totals.

Two pricing paths:
- Standard (massage/spa, hair/nails, non-retouching custom types): customer
  cost is the hourly rate times hours times staff, and margin falls out of it.
- Retouching (headshot and retouching custom types): customer cost is
  back-derived from professional revenue at the type's fixed margin.

Every monetary step is rounded to the configured precision before the next
step consumes it, so results agree to the cent with previously issued quotes.
"""
import logging
import math
from dataclasses import replace
from typing import Iterable, Optional, Union

from ..config.settings import get_settings, Settings
from .cache import ResultCache
from .errors import DivisionByZero, EmptyConfigurationList, ValidationError
from .formatting import format_currency, format_percentage
from .models import AggregateResult, CalculationInput, CalculationResult, LocationTotals
from .precision import round_count, round_half_up
from .presets import PresetConfiguration, get_preset, list_presets
from .service_types import ServiceType, ServiceTypeRef, ServiceTypeRegistry
from .validation import validate_events_per_year, validate_input

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Stateless-per-call pricing calculator.

    The service type registry and the result cache are owned by the caller
    and injected; the engine keeps no other state between calls.
    """

    def __init__(
        self,
        registry: Optional[ServiceTypeRegistry] = None,
        cache: Optional[ResultCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else ServiceTypeRegistry(
            default_margin=self.settings.default_custom_margin
        )
        self.cache = cache

    def _round(self, value: float) -> float:
        return round_half_up(value, self.settings.precision)

    def _margin(self, net_profit: float, customer_total_cost: float) -> float:
        """Profit as a percentage of customer cost."""
        if customer_total_cost == 0:
            raise DivisionByZero(
                "Cannot compute profit margin: customer total cost is 0",
                field="customer_total_cost", constraint="!= 0", value=customer_total_cost,
            )
        return self._round(net_profit / customer_total_cost * 100)

    # ------------------------------------------------------------------
    # Service types and presets
    # ------------------------------------------------------------------

    def register_service_type(self, name: str, margin: Optional[float] = None,
                              requires_retouching: bool = False) -> ServiceType:
        """Register a custom service type on this engine's registry."""
        service_type = self.registry.register(name, margin, requires_retouching)
        logger.info("Registered service type %s (margin=%s, retouching=%s)",
                    service_type.name, service_type.margin, service_type.requires_retouching)
        return service_type

    def get_preset(self, service_type: ServiceTypeRef, size: str) -> Optional[PresetConfiguration]:
        """Look up a preset configuration, or None."""
        return get_preset(service_type, size)

    def list_presets(self, service_type: ServiceTypeRef) -> list[PresetConfiguration]:
        return list_presets(service_type)

    def clear_cache(self):
        if self.cache is not None:
            self.cache.clear()

    # ------------------------------------------------------------------
    # Single event
    # ------------------------------------------------------------------

    def validate(self, params: CalculationInput) -> ServiceType:
        """Validate an input, returning its resolved service type."""
        try:
            return validate_input(params, self.registry, self.settings)
        except ValidationError as e:
            logger.warning("Rejected input: %s (field=%s)", e.message, e.field)
            raise

    def calculate(self, params: CalculationInput) -> CalculationResult:
        """
        Calculate pricing for a single event.

        Args:
            params: CalculationInput for one day/location

        Returns:
            CalculationResult with appointments, revenue, cost, margin and trace

        Raises:
            ValidationError subclass for malformed input, DivisionByZero when a
            margin would be taken over a zero customer cost.
        """
        service_type = self.validate(params)

        # Key on the resolved type so a re-registered custom type never hits
        key = replace(params, service_type=service_type)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", service_type.name)
                return replace(cached, trace=list(cached.trace))

        result = self._compute(params, service_type)

        if self.cache is not None:
            self.cache.put(key, result)
            return replace(result, trace=list(result.trace))
        return result

    def _compute(self, params: CalculationInput, service_type: ServiceType) -> CalculationResult:
        r = self._round
        hours = params.total_hours
        pros = params.num_professionals

        appts_per_pro_per_hour = math.floor(60 / params.appointment_minutes)
        appointments_per_hour = pros * appts_per_pro_per_hour
        if params.explicit_appointment_count is not None:
            total_appointments = params.explicit_appointment_count
            count_source = "Explicit appointment count"
        else:
            total_appointments = round_count(appointments_per_hour * hours)
            count_source = f"{appointments_per_hour}/hour × {hours} hours"

        margin = service_type.margin
        trace = []

        if service_type.requires_retouching:
            professional_revenue = r(params.professional_hourly_rate * hours * pros)
            retouching_total = r(params.retouching_cost_per_appointment * total_appointments)
            provisional_cost = r(professional_revenue + retouching_total)
            customer_total_cost = r(professional_revenue / (1 - margin / 100))
            net_profit = r(customer_total_cost * (margin / 100))
            profit_margin_percent = margin
            trace.append(("Pricing Path", f"Retouching ({service_type.name}) at fixed margin",
                          format_percentage(margin)))
            trace.append(("Retouching", f"{total_appointments} × "
                          f"{format_currency(params.retouching_cost_per_appointment)} "
                          f"(provisional cost {format_currency(provisional_cost)} not used)",
                          format_currency(retouching_total)))
        else:
            professional_revenue = r(params.professional_hourly_rate * hours * pros
                                     + params.early_arrival_fee)
            customer_total_cost = r(params.customer_hourly_rate * hours * pros)
            net_profit = r(customer_total_cost - professional_revenue)
            profit_margin_percent = self._margin(net_profit, customer_total_cost)
            trace.append(("Pricing Path", f"Standard ({service_type.name})", None))

        if params.discount_percent > 0:
            discount_amount = r(customer_total_cost * (params.discount_percent / 100))
            customer_total_cost = r(customer_total_cost - discount_amount)
            if service_type.requires_retouching:
                net_profit = r(customer_total_cost * (margin / 100))
            else:
                net_profit = r(customer_total_cost - professional_revenue)
                profit_margin_percent = self._margin(net_profit, customer_total_cost)
            trace.append(("Discount", f"{params.discount_percent}% off customer cost",
                          f"-{format_currency(discount_amount)}"))

        annualized_cost = r(customer_total_cost * params.events_per_year)

        result = CalculationResult(
            appts_per_pro_per_hour=appts_per_pro_per_hour,
            appointments_per_hour=appointments_per_hour,
            total_appointments=total_appointments,
            professional_revenue=professional_revenue,
            customer_total_cost=customer_total_cost,
            net_profit=net_profit,
            profit_margin_percent=profit_margin_percent,
            annualized_cost=annualized_cost,
            service_type=service_type.name,
            total_hours=hours,
            day=params.day,
            location=params.location,
            discount_percent=params.discount_percent,
        )
        result.add_trace("Appointments", count_source, str(total_appointments))
        for step, desc, val in trace:
            result.add_trace(step, desc, val)
        result.add_trace("Professional Revenue", f"{pros} pros × {hours} hours",
                         format_currency(professional_revenue))
        result.add_trace("Customer Cost", "Total charged to customer",
                         format_currency(customer_total_cost))
        result.add_trace("Net Profit", f"Margin {format_percentage(profit_margin_percent)}",
                         format_currency(net_profit))
        result.add_trace("Annualized", f"{params.events_per_year} events/year",
                         format_currency(annualized_cost))

        logger.debug("Calculated %s: %s appointments, cost %s, net %s",
                     service_type.name, total_appointments, customer_total_cost, net_profit)
        return result

    # ------------------------------------------------------------------
    # Multiple days / locations
    # ------------------------------------------------------------------

    def _accumulate(self, totals: Union[LocationTotals, AggregateResult], result: CalculationResult):
        r = self._round
        totals.total_appointments += result.total_appointments
        totals.professional_revenue = r(totals.professional_revenue + result.professional_revenue)
        totals.customer_total_cost = r(totals.customer_total_cost + result.customer_total_cost)
        totals.net_profit = r(totals.net_profit + result.net_profit)

    def calculate_multiple(
        self,
        configurations: Iterable[CalculationInput],
        events_per_year: Optional[int] = None,
    ) -> AggregateResult:
        """
        Calculate every configuration in order and fold them into totals.

        Margins are recomputed from summed net profit and cost, never averaged.
        Annualization uses `events_per_year` (the configured default when
        omitted); per-input values are not consulted for the aggregate. The
        first failure is raised and no partial aggregate is returned.
        """
        configurations = list(configurations)
        if not configurations:
            raise EmptyConfigurationList(
                "At least one configuration is required",
                field="configurations", constraint="non-empty",
            )
        if events_per_year is None:
            events_per_year = self.settings.default_events_per_year
        validate_events_per_year(events_per_year)

        aggregate = AggregateResult(events_per_year=events_per_year)

        for index, params in enumerate(configurations, start=1):
            try:
                result = self.calculate(params)
            except ValidationError as e:
                logger.warning("Configuration %d rejected: %s", index, e.message)
                raise

            day = params.day or f"Day {index}"
            location = params.location or f"Location {index}"
            result = replace(result, day=day, location=location)
            aggregate.day_results.append(result)

            totals = aggregate.location_results.setdefault(location, LocationTotals())
            self._accumulate(totals, result)
            self._accumulate(aggregate, result)

        aggregate.profit_margin_percent = self._margin(
            aggregate.net_profit, aggregate.customer_total_cost
        )
        aggregate.annualized_cost = self._round(aggregate.customer_total_cost * events_per_year)

        for totals in aggregate.location_results.values():
            totals.profit_margin_percent = self._margin(totals.net_profit, totals.customer_total_cost)
            totals.annualized_cost = self._round(totals.customer_total_cost * events_per_year)

        logger.info("Aggregated %d configurations across %d locations: cost %s, margin %s",
                    len(configurations), len(aggregate.location_results),
                    aggregate.customer_total_cost, aggregate.profit_margin_percent)
        return aggregate
