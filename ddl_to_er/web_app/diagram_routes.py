"""
Diagram routes - JSON API around the SQL to ER pipeline
"""
import io
import logging

from flask import Blueprint, jsonify, request, send_file

from ..src import build_er_model, render_er_diagram

logger = logging.getLogger(__name__)


class BadRequest(ValueError):
    """The request body is not usable"""


def _read_payload():
    """Pull the SQL texts and annotation text out of the JSON body"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')

    sql = data.get('sql')
    if isinstance(sql, str):
        sql_texts = [sql]
    elif isinstance(sql, list) and all(isinstance(item, str) for item in sql):
        sql_texts = sql
    else:
        raise BadRequest("'sql' must be a string or a list of strings")

    relations = data.get('relations')
    if relations is not None and not isinstance(relations, str):
        raise BadRequest("'relations' must be a string")

    return sql_texts, relations


def create_diagram_blueprint(watermark):
    """Create the diagram API blueprint"""
    diagram_bp = Blueprint('diagram', __name__, url_prefix='/api')

    @diagram_bp.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    @diagram_bp.route('/parse_sql', methods=['POST'])
    def api_parse_sql():
        """Parse SQL and return the diagram with the table model"""
        try:
            sql_texts, relations_text = _read_payload()
            tables, relations = build_er_model(sql_texts, relations_text)

            return jsonify({
                'diagram': render_er_diagram(tables, relations),
                'tables': [table.to_dict() for table in tables],
                'relationships': [rel.to_dict() for rel in relations],
            })

        except BadRequest as e:
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.error(f"Unexpected error in api_parse_sql: {e}")
            return jsonify({'error': str(e)}), 500

    @diagram_bp.route('/export_diagram', methods=['POST'])
    def api_export_diagram():
        """Download the diagram as a .mmd file"""
        try:
            sql_texts, relations_text = _read_payload()
            tables, relations = build_er_model(sql_texts, relations_text)
            diagram = render_er_diagram(tables, relations)

            diagram_file = io.BytesIO()
            diagram_file.write(f"{diagram}\n{watermark}\n".encode('utf-8'))
            diagram_file.seek(0)

            return send_file(diagram_file,
                             mimetype='text/plain',
                             as_attachment=True,
                             download_name='er_diagram.mmd')

        except BadRequest as e:
            return jsonify({'error': str(e)}), 400
        except Exception as e:
            logger.error(f"Failed to export diagram: {e}")
            return jsonify({'error': str(e)}), 500

    return diagram_bp
