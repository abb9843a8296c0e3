# src/main.py
import asyncio
import os
import sys
import threading
import traceback

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from telegram import Update

from src.bot.bot_setup import setup_and_run_bot
from src.config import WEBHOOK_PATH
from src.core.db import get_supabase_client

print("DEBUG: Iniciando src/main.py (Execução Global)")

# --- Setup da Aplicação no Escopo Global (executado uma vez quando o Gunicorn carrega o módulo) ---
try:
    load_dotenv()

    supabase_client = get_supabase_client()
    print("DEBUG: Cliente Supabase inicializado.")

    config = {
        "TELEGRAM_BOT_TOKEN": os.getenv("TELEGRAM_BOT_TOKEN"),
        "SUPABASE_CLIENT": supabase_client,
    }

    ptb_application = setup_and_run_bot(config)

    # O python-telegram-bot precisa de um único event loop vivo durante toda a execução.
    # Ele roda numa thread própria e o Flask envia as atualizações para ele.
    bot_loop = asyncio.new_event_loop()
    threading.Thread(target=bot_loop.run_forever, name="ptb-loop", daemon=True).start()
    asyncio.run_coroutine_threadsafe(ptb_application.initialize(), bot_loop).result()
    print("DEBUG: python-telegram-bot Application inicializada com sucesso!")

    flask_app = Flask(__name__)

    @flask_app.route("/", methods=["GET"])
    def health():
        return jsonify({"status": "ok"}), 200

    @flask_app.route(WEBHOOK_PATH, methods=["POST"])
    def telegram_webhook():
        if not request.is_json:
            print("ERROR: Webhook received non-JSON request.", file=sys.stderr)
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        try:
            update = Update.de_json(update_json, ptb_application.bot)
            future = asyncio.run_coroutine_threadsafe(ptb_application.process_update(update), bot_loop)
            future.result()
            return jsonify({"status": "ok"}), 200
        except Exception as e:
            print(f"ERROR: Failed to process Telegram update: {e}", file=sys.stderr)
            traceback.print_exc(file=sys.stderr)
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    wsgi_app = flask_app
    print("DEBUG: Aplicação WSGI pronta.")

except Exception as e:
    print(f"ERROR: Erro crítico durante a inicialização em src/main.py: {e}", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)
    raise
