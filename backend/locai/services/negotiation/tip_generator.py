"""Coaching tips for the negotiator, driven by which discount categories are enabled."""

from locai.data.currency import format_percentage
from locai.services.negotiation.config import NegotiationSettings

# Display hint only; clients sort on it.
PRIORITIES = ("critical", "high", "medium", "low")


def _tip(priority: str, tip: str, reason: str) -> dict:
    return {"priority": priority, "tip": tip, "reason": reason}


def generate_negotiation_tips(opportunities: dict, settings: NegotiationSettings) -> list[dict]:
    if not settings.allow_ai_negotiation:
        return [
            _tip(
                "critical",
                "NÃO ofereça descontos: a negociação pela IA está desativada",
                "Desativada pelo proprietário nas configurações de negociação",
            )
        ]

    tips = []
    options = {o["method"]: o for o in opportunities["paymentMethod"]["options"]}

    pix = options["pix"]
    if pix["enabled"] and pix["discount"] > 0:
        tips.append(_tip(
            "high",
            f"SEMPRE mencione o PIX primeiro ({format_percentage(pix['discount'])} OFF)",
            "Maior taxa de conversão e sem taxas de processamento",
        ))

    extended = opportunities["extendedStay"]
    if extended["enabled"]:
        entry = extended["tiers"][0]
        tips.append(_tip(
            "high",
            f"Se o cliente reservar menos de {entry['minNights']} noites, sugira estender para {entry['minNights']}+ noites",
            f"Ganha desconto adicional de {format_percentage(entry['discount'])}",
        ))

    book_now = opportunities["bookNow"]
    if book_now["enabled"]:
        tips.append(_tip(
            "medium",
            f'Use "Fechando AGORA" para adicionar {format_percentage(book_now["discount"])} extra',
            f"Cria urgência: a oferta vale por {book_now['timeLimitHours']} horas",
        ))

    early = opportunities["earlyBooking"]
    if early["enabled"]:
        entry = early["tiers"][0]
        tips.append(_tip(
            "medium",
            f"Para reservas com {entry['daysInAdvance']}+ dias de antecedência, destaque o desconto de planejamento",
            "Incentiva reservas antecipadas e melhora o fluxo de caixa",
        ))

    last_minute = opportunities["lastMinute"]
    if last_minute["enabled"]:
        entry = last_minute["tiers"][0]
        tips.append(_tip(
            "medium",
            f"Com check-in em até {entry['daysUntilCheckIn']} dias, ofereça a condição de última hora",
            "Evita noites vazias no calendário",
        ))

    cash = options["cash"]
    if cash["enabled"] and cash["discount"] > 0:
        tips.append(_tip(
            "medium",
            f"Pagamento em dinheiro também tem {format_percentage(cash['discount'])} de desconto",
            "Alternativa para clientes sem PIX",
        ))

    if settings.price_justifications:
        tips.append(_tip(
            "medium",
            "Antes de descontar, justifique o valor: " + "; ".join(settings.price_justifications),
            "Valoriza o imóvel e reduz a necessidade de desconto",
        ))

    if settings.negotiation_notes:
        tips.append(_tip("medium", settings.negotiation_notes, "Orientação do proprietário"))

    if settings.upsell_enabled and settings.upsell_suggestions:
        tips.append(_tip(
            "low",
            "Ofereça extras: " + "; ".join(settings.upsell_suggestions),
            "Aumenta o ticket médio da reserva",
        ))

    if options["card"]["enabled"]:
        tips.append(_tip(
            "low",
            f"Só mencione cartão se o cliente insistir (até {settings.max_installments}x sem juros, sem desconto)",
            "PIX e dinheiro são sempre melhores opções",
        ))
    else:
        tips.append(_tip(
            "low",
            "Só mencione cartão se o cliente insistir (sem desconto)",
            "PIX e dinheiro são sempre melhores opções",
        ))

    max_total = opportunities["limits"]["maxTotalDiscount"]
    if max_total > 0:
        tips.append(_tip(
            "critical",
            f"NUNCA ultrapasse {format_percentage(max_total)} de desconto total",
            "Limite configurado pelo proprietário",
        ))
    else:
        tips.append(_tip(
            "critical",
            "NÃO ofereça nenhum desconto: o limite de desconto está em 0%",
            "Limite configurado pelo proprietário",
        ))

    return tips
