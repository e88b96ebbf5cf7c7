"""Widget embed script generator."""

import json

WIDGET_SCRIPT_PATH = "/widget/embeddable-chatbot.js"
WIDGET_CSS_PATH = "/widget/chat-widget.css"


def _js_string(value: str) -> str:
    """Encode a value as a JavaScript string literal safe inside <script>."""
    return json.dumps(value).replace("</", "<\\/")


def generate_embed_script(config_id: str, server_url: str) -> str:
    """
    Generate the loader served at /embed.js.

    The loader fetches the widget config, injects the widget CSS and script
    from this server and instantiates EmbeddableChatbot against /api.
    """
    config_id_js = _js_string(config_id)
    server_url_js = _js_string(server_url.rstrip("/"))

    return f'''(function() {{
  'use strict';

  var CONFIG_ID = {config_id_js};
  var SERVER_URL = {server_url_js};

  fetch(SERVER_URL + '/api/widget/config/' + encodeURIComponent(CONFIG_ID))
    .then(function(response) {{ return response.json(); }})
    .then(function(data) {{
      if (data.success) {{
        loadChatWidget(data.config);
      }} else {{
        console.error('Failed to load chat widget configuration');
      }}
    }})
    .catch(function(error) {{
      console.error('Chat widget error:', error);
      loadChatWidget({{
        title: 'Chat with us!',
        welcomeMessage: 'Hi! How can I help you today?',
        theme: {{ primaryColor: '#667eea', secondaryColor: '#764ba2' }}
      }});
    }});

  function loadChatWidget(config) {{
    var css = document.createElement('link');
    css.rel = 'stylesheet';
    css.href = SERVER_URL + '{WIDGET_CSS_PATH}';
    document.head.appendChild(css);

    var script = document.createElement('script');
    script.src = SERVER_URL + '{WIDGET_SCRIPT_PATH}';
    script.onload = function() {{
      if (window.EmbeddableChatbot) {{
        var options = Object.assign({{}}, config, config.theme || {{}}, {{
          apiUrl: SERVER_URL + '/api'
        }});
        window.chatWidget = new window.EmbeddableChatbot(options);
      }}
    }};
    document.head.appendChild(script);
  }}
}})();
'''
