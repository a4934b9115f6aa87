"""Message composer — turns an evaluated discount into the pitch sent to the guest.

Pure functions only: every value the templates need is passed in.
"""

from collections.abc import Callable
from dataclasses import dataclass

from locai.data.currency import format_percentage, format_price
from locai.services.negotiation.config import NegotiationSettings


@dataclass(frozen=True)
class MessageContext:
    strategy: str
    percentage: float
    original_price: float
    final_price: float
    reason: str
    property_name: str

    @property
    def savings(self) -> float:
        return self.original_price - self.final_price


def _none_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    return f"O valor para {ctx.property_name} é {format_price(ctx.original_price)}."


def _installment_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    installments = max(settings.max_installments, 1)
    monthly = ctx.original_price / installments
    return (
        f"Perfeito! {ctx.property_name} sai por {format_price(ctx.original_price)}.\n\n"
        f"E para facilitar para você, posso parcelar em até **{installments}x sem juros** no cartão! "
        f"Assim fica apenas {format_price(monthly)} por mês. O que acha?"
    )


def _payment_method_message(method_label: str) -> Callable[[MessageContext, NegotiationSettings], str]:
    def compose(ctx: MessageContext, settings: NegotiationSettings) -> str:
        return (
            f"Ótima escolha! {ctx.property_name} normalmente sai por {format_price(ctx.original_price)}.\n\n"
            f"Mas tenho uma **proposta especial** para você: pagando à vista {method_label}, "
            f"consigo te dar um desconto de **{format_percentage(ctx.percentage)}**! 🎉\n\n"
            f"Ou seja, você fecha por apenas **{format_price(ctx.final_price)}**. "
            f"São {format_price(ctx.savings)} de economia! Vale super a pena, né?"
        )

    return compose


def _extended_stay_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    return (
        f"Olha, {ctx.property_name} está {format_price(ctx.original_price)} para as datas que você pediu.\n\n"
        "Mas deixa eu te fazer uma **proposta irresistível**:\n\n"
        f"Se você estender sua estadia, consigo te dar um **desconto de {format_percentage(ctx.percentage)}** "
        f"no valor total! Você aproveita mais dias e ainda economiza {format_price(ctx.savings)}.\n\n"
        f"Valor final: **{format_price(ctx.final_price)}**\n\n"
        "Mais dias de férias + desconto = Negócio perfeito! O que me diz?"
    )


def _book_now_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    return (
        f"{ctx.property_name} está disponível por {format_price(ctx.original_price)}.\n\n"
        "Mas ó, tenho uma **condição especial** para você **fechar agora**:\n\n"
        f"Se confirmar a reserva nas próximas {settings.book_now_time_limit} horas, te dou "
        f"**{format_percentage(ctx.percentage)} de desconto**! Valor final: **{format_price(ctx.final_price)}**.\n\n"
        f"São {format_price(ctx.savings)} de economia só por decidir agora. "
        "Essa oportunidade não vai durar muito! Vamos fechar?"
    )


def _generic_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    return (
        f"{ctx.reason}. Valor final: {format_price(ctx.final_price)} "
        f"({format_percentage(ctx.percentage)} de desconto aplicado)."
    )


MESSAGE_TEMPLATES: dict[str, Callable[[MessageContext, NegotiationSettings], str]] = {
    "none": _none_message,
    "card_installment": _installment_message,
    "pix": _payment_method_message("no **PIX**"),
    "cash": _payment_method_message("em **dinheiro**"),
    "extended_stay": _extended_stay_message,
    "book_now": _book_now_message,
}


def compose_discount_message(ctx: MessageContext, settings: NegotiationSettings) -> str:
    """Render the negotiation pitch for ``ctx.strategy``; unknown strategies get a generic line."""
    template = MESSAGE_TEMPLATES.get(ctx.strategy, _generic_message)
    return template(ctx, settings)


# Combinator scenario pitches

SCENARIO_PITCHES: dict[str, str] = {
    "immediate_booking": "Fechando AGORA no PIX você ganha {total} de desconto!",
    "extended_stay": "Ficando {min_nights}+ noites no PIX você economiza {total}!",
    "early_booking": "Reservando com {days_in_advance}+ dias e PIX: {total} OFF!",
    "last_minute": "Oportunidade de última hora: {total} OFF no PIX!",
    "maximum_discount": "SUPER OFERTA: Ficando {min_nights}+ dias, fechando AGORA no PIX = {total} OFF!",
}


def compose_scenario_pitch(scenario: str, total_discount: float, **values) -> str:
    template = SCENARIO_PITCHES.get(scenario, "Combinação especial: {total} OFF!")
    return template.format(total=format_percentage(total_discount), **values)
