import numpy as np
import pandas as pd
import pytest

from cluster import train_kmeans
from predict_batch import load_model, predict_new, save_model
from preprocess import clean_and_preprocess
from conftest import make_survey


@pytest.fixture
def trained(survey_df):
    encoded, X_scaled, scaler, features = clean_and_preprocess(survey_df)
    model, labels, _ = train_kmeans(X_scaled, k=3)
    return model, scaler, features, encoded, labels


def test_save_and_load_model(trained, tmp_path):
    model, scaler, features, _, _ = trained
    path = tmp_path / "bundle.joblib"
    save_model(model, scaler, features, str(path))
    loaded_model, loaded_scaler, loaded_features = load_model(str(path))
    assert loaded_features == features
    assert np.allclose(loaded_model.cluster_centers_, model.cluster_centers_)
    assert np.allclose(loaded_scaler.mean_, scaler.mean_)


def test_predict_encoded_matches_training_labels(trained, tmp_path):
    model, scaler, features, encoded, labels = trained
    out = tmp_path / "pred.csv"
    result = predict_new(model, scaler, features, encoded, output_path=str(out))
    assert (result['Cluster'].to_numpy() == labels).all()
    assert 'Cluster' not in encoded.columns
    assert len(pd.read_csv(out)) == len(encoded)


def test_predict_raw_answers(trained):
    model, scaler, features, _, _ = trained
    new = make_survey(n=10, seed=5)
    new['Fav genre'] = 'Rock'
    result = predict_new(model, scaler, features, new, output_path=None)
    assert len(result) == 10
    assert set(result['Cluster']) <= set(range(3))
    # genres nobody picked are filled in as zeros
    assert (result['Fav_Pop'] == 0).all()


def test_predict_missing_features_raises(trained):
    model, scaler, features, encoded, _ = trained
    with pytest.raises(ValueError, match="Missing required features"):
        predict_new(model, scaler, features, encoded.drop(columns=['Hours per day']), output_path=None)
