"""
Carrier Engine - Flask REST API
웹 서비스용 API 엔드포인트

실행: flask --app api run --debug
또는: python api.py
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from carrier_engine import (
    CONDITION_NAMES,
    DEFAULT_FREQUENCY_TABLE,
    PREDEFINED_SCENARIOS,
    PedigreeFormatError,
    PedigreeVisualizer,
    analyze_pedigree,
    auto_layout,
    parse_pedigree_object,
    pedigree_report,
    validate_pedigree_object,
)
from carrier_engine.analysis import OPTIMIZERS

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # CORS 활성화

# 전역 객체
visualizer = PedigreeVisualizer()


@app.route('/')
def index():
    """API 정보"""
    return jsonify({
        'name': 'Carrier Engine API',
        'version': '1.0.0',
        'description': '상염색체 열성 질환 보인자 위험도 계산 API',
        'endpoints': {
            '/analyze': 'POST - 가계도 분석',
            '/validate': 'POST - 가계도 구조 검증',
            '/conditions': 'GET - 질환 및 집단별 보인자 빈도',
            '/scenarios': 'GET - 예제 가계도 목록'
        }
    })


@app.route('/conditions', methods=['GET'])
def get_conditions():
    """질환 및 집단별 보인자 빈도"""
    frequencies = DEFAULT_FREQUENCY_TABLE.to_dict()
    conditions = [
        {
            'id': condition,
            'name': CONDITION_NAMES.get(condition, condition),
            'frequencies': frequencies[condition],
        }
        for condition in DEFAULT_FREQUENCY_TABLE.conditions()
    ]
    return jsonify({'conditions': conditions})


@app.route('/scenarios', methods=['GET'])
def get_scenarios():
    """예제 가계도 목록"""
    return jsonify({'scenarios': PREDEFINED_SCENARIOS})


@app.route('/validate', methods=['POST'])
def validate_pedigree():
    """가계도 JSON 구조 검증"""
    data = request.get_json(silent=True)
    report = validate_pedigree_object(data)
    return jsonify(report.to_dict())


@app.route('/analyze', methods=['POST'])
def analyze():
    """
    가계도 분석

    Request Body:
    {
        "condition": "cf",
        "individuals": [...],          // 가계도 구성원
        "optimizer": "annealing",      // annealing / powell / both / none
        "seed": null,                  // 랜덤 시드 (선택)
        "iterations": 10000,           // 담금질 최대 반복 횟수
        "fractions": false,            // 분수 표시
        "image": false                 // 가계도 이미지 포함
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400

    optimizer = data.get('optimizer', 'annealing')
    if optimizer not in OPTIMIZERS:
        return jsonify({'success': False, 'error': f'Unknown optimizer {optimizer!r}'}), 400

    try:
        document = parse_pedigree_object(data)
    except PedigreeFormatError as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    try:
        pedigree = document.pedigree
        as_fraction = bool(data.get('fractions', False))
        result = analyze_pedigree(
            pedigree,
            optimizer=optimizer,
            seed=data.get('seed'),
            iterations=int(data.get('iterations', 10000)),
            freeze_uninformative=bool(data.get('freeze_uninformative', False)),
        )

        response = pedigree_report(pedigree, result, as_fraction)
        response['success'] = True

        if data.get('image'):
            positions = document.positions or auto_layout(pedigree)
            img = visualizer.get_base64_image(
                pedigree, positions=positions, as_fraction=as_fraction
            )
            response['image'] = f"data:image/png;base64,{img}"

        return jsonify(response)

    except Exception as e:
        logger.exception("Analysis failed")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


if __name__ == '__main__':
    print("=" * 50)
    print("Carrier Engine API Server")
    print("=" * 50)
    print("Server starting at http://localhost:5000")
    print()
    app.run(debug=True, host='0.0.0.0', port=5000)
