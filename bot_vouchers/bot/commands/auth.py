import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from bot_vouchers.core.api import ApiError


async def login_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    auth = context.bot_data["auth"]
    if len(context.args or []) != 2:
        await update.message.reply_text("Uso: `/login [email] [senha]`", parse_mode="Markdown")
        return

    email, password = context.args
    try:
        await asyncio.to_thread(auth.login, email, password)
    except ApiError:
        await update.message.reply_text(f"❌ {auth.error}")
        return

    # Com o token em mãos, carrega as coleções
    await asyncio.gather(context.bot_data["vouchers"].reload(), context.bot_data["expenses"].reload())
    await update.message.reply_text(f"✅ Bem-vindo(a), {auth.display_name}! Use /resumo para começar.")


async def logout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    context.bot_data["auth"].logout()
    await update.message.reply_text("👋 Você saiu da sua conta.")
